"""Content Bridge: JSON endpoints over an abstract content store."""

__version__ = "0.1.0"
