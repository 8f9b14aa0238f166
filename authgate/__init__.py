"""authgate: pluggable HTTP Basic authentication for Starlette applications."""

__version__ = "0.1.0"
