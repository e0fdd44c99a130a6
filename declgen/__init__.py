"""Type declaration generator for exported game data."""

__version__ = "0.1.0"
