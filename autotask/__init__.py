"""Declarative, idempotent task runner."""

__version__ = "0.1.0"

__all__ = ["actions", "definitions", "flow", "loader", "utils"]
