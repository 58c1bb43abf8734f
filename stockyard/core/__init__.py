"""Core domain layer - entities, interfaces, exceptions and pure services."""

from stockyard.core import entities, exceptions, interfaces, services

__all__ = ["entities", "interfaces", "exceptions", "services"]
