"""Export layer — Markdown reports for recommendations and HR reviews."""

from jobswap.export.markdown import MarkdownExporter

__all__ = ["MarkdownExporter"]
