"""HTTP route modules."""

from __future__ import annotations

from .analyze import router as analyze_router

__all__ = ["analyze_router"]
