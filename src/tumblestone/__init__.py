"""Tumblestone puzzle solver."""

__version__ = "0.1.0"
