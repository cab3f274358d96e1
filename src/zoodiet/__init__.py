"""Diet reporting for zoo animal-care operations."""

__version__ = "0.1.0"
