"""Boda: wedding pages, guest RSVPs and gift contributions."""

__version__ = "0.1.0"
