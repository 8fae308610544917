"""Pet Catalog extraction service."""

__version__ = "1.0.0"
