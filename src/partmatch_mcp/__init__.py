"""MPN similarity matching for electronic component deduplication and substitution."""

__version__ = "0.3.0"
