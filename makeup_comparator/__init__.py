"""Command line finder and comparator for makeup retailer websites."""

__version__ = "0.1.0"
