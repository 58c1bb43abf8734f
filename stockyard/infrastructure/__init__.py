"""Infrastructure layer implementations."""

from stockyard.infrastructure import storage

__all__ = ["storage"]
