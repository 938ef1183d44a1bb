"""Command-line interface for the Boda API (``boda``)."""
