"""W2 Calc - W-2 text extraction and federal bracket tax estimates."""

__version__ = "0.1.0"
