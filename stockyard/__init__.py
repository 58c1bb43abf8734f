"""Stockyard: dual serialized / bulk inventory tracking."""

__version__ = "1.0.0"
