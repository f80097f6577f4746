"""docextract - document parsing and book metadata extraction with ADE."""

__version__ = "0.1.0"
