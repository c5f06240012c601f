"""API router exports."""

from .routes import build_router
from .scoring_routes import build_scoring_router

__all__ = ["build_router", "build_scoring_router"]
