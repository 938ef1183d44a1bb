"""Operational scripts invoked from the ``boda`` CLI."""
