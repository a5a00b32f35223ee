"""Academic paper writing backend: generate, humanize, check, and export."""

__version__ = "1.0.0"
