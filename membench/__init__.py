"""Cross-runtime memory benchmark harness."""

__version__ = "0.1.0"
