"""Diagnostics with labeled source spans, named sources and source-context extraction."""

__version__ = "0.1.0"

__all__ = ["protocol", "sources", "named_source", "runtime_diagnostic"]