"""JobSwap scoring engine — compatibility, recommendations and HR guidance."""

__version__ = "0.1.0"
