"""
Application layer - use cases and request DTOs.

This layer orchestrates business logic by:
1. Defining request DTOs validated before any store is touched
2. Implementing use cases that coordinate stores and core services

Use cases are the only entry point for callers such as manage.py.
"""

from stockyard.application import dto, use_cases

__all__ = ["dto", "use_cases"]
