"""HTTP route declarations for the FastAPI application."""

from fastapi import APIRouter
from typing import Union

from loan_risk.core.config import AppSettings


def build_router(settings: AppSettings) -> APIRouter:
    """Build and return application routes with injected settings."""
    router = APIRouter()

    @router.get("/", summary="Root endpoint")
    def read_root() -> dict[str, str]:
        """Return a basic message confirming service availability."""
        return {"message": "{0} is running".format(settings.app_name)}

    @router.get("/health", summary="Health check")
    def health_check() -> dict[str, str]:
        return {"status": "ok"}

    @router.get("/settings", summary="Settings snapshot")
    def get_settings_snapshot() -> dict[str, Union[str, bool, int]]:
        """Expose non-sensitive settings useful for local verification."""
        return {
            "app_name": settings.app_name,
            "debug": settings.debug,
            "default_loan_type": settings.default_loan_type,
            "profiles_backend": settings.profiles_backend,
            "approve_min_score": settings.approve_min_score,
            "review_min_score": settings.review_min_score,
        }

    return router
