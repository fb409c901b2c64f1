"""API routes."""

from . import expand, services

__all__ = ["expand", "services"]
