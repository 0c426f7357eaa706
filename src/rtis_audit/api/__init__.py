"""HTTP surface of the trip audit."""

from .main import app, health

__all__ = ["app", "health"]
