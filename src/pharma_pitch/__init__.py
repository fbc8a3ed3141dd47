"""Pharma Pitch - brand catalog, doctor directory and slideshow engine."""

__version__ = "0.1.0"
