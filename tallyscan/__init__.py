"""Receipt-to-structured-data extraction for personal expense tracking."""

__version__ = "0.1.0"
