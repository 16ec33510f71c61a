"""Energy usage dashboard analytics."""

__version__ = "1.0.0"
