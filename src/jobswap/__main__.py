"""CLI entry point for the JobSwap scoring engine."""

from __future__ import annotations

import argparse
import sys

from jobswap.errors import ActionableError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jobswap",
        description="Swap-partner recommendations and HR approval guidance for JobSwap",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        metavar="PATH",
        help="Settings file (default: config/settings.toml)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument(
        "--log-dir",
        type=str,
        default=None,
        metavar="DIR",
        help="Also write a timestamped log file under DIR",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    def add_format(p: argparse.ArgumentParser, *, markdown: bool) -> None:
        choices = ["text", "json", "markdown"] if markdown else ["text", "json"]
        p.add_argument(
            "--format",
            choices=choices,
            default="text",
            help="Output format (default: text)",
        )
        if markdown:
            p.add_argument(
                "--output",
                type=str,
                default=None,
                metavar="PATH",
                help="Write the Markdown report to PATH instead of stdout",
            )

    # -- recommend -----------------------------------------------------------
    recommend_p = sub.add_parser("recommend", help="Rank swap partners for the current user")
    recommend_p.add_argument(
        "--top",
        type=int,
        default=None,
        metavar="N",
        help="Number of matches to flag as recommended (default: [scoring].top_n)",
    )
    add_format(recommend_p, markdown=True)

    # -- hr-review -----------------------------------------------------------
    hr_p = sub.add_parser("hr-review", help="Analyse pending HR swap requests")
    hr_p.add_argument(
        "request_id",
        type=str,
        nargs="?",
        default=None,
        help="Analyse a single request (default: all)",
    )
    add_format(hr_p, markdown=True)

    # -- commute -------------------------------------------------------------
    commute_p = sub.add_parser("commute", help="Estimate the impact of a commute change")
    commute_p.add_argument("before", type=float, help="Current one-way commute in minutes")
    commute_p.add_argument("after", type=float, help="New one-way commute in minutes")
    commute_p.add_argument(
        "--days",
        type=int,
        default=None,
        help="Working days per month (default: [commute].working_days_per_month)",
    )
    add_format(commute_p, markdown=False)

    # -- parse-resume --------------------------------------------------------
    resume_p = sub.add_parser("parse-resume", help="Extract a structured profile from a resume")
    resume_p.add_argument("path", type=str, help="Plain-text resume file")
    add_format(resume_p, markdown=False)

    return parser


def main(argv: list[str] | None = None) -> None:
    from jobswap import cli

    parser = build_parser()
    args = parser.parse_args(argv)

    handlers = {
        "recommend": cli.handle_recommend,
        "hr-review": cli.handle_hr_review,
        "commute": cli.handle_commute,
        "parse-resume": cli.handle_parse_resume,
    }

    try:
        cli.configure_logging(args)
        handlers[args.command](args)
    except ActionableError as exc:
        print(f"Error: {exc.error}", file=sys.stderr)
        if exc.suggestion:
            print(f"  Suggestion: {exc.suggestion}", file=sys.stderr)
        if exc.troubleshooting:
            for step in exc.troubleshooting.steps:
                print(f"  {step}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
