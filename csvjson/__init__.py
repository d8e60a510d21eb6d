"""CSV to JSON conversion for spreadsheet exports."""

__version__ = "0.2.0"
