"""Application entrypoint for the loan risk scoring FastAPI service."""

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from loan_risk.api.routes import build_router
from loan_risk.api.scoring_routes import build_scoring_router
from loan_risk.core import AppSettings, get_logger, load_settings, setup_logging
from loan_risk.services import ScoringService, build_profile_store


logger = get_logger(__name__)


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """Create and configure a FastAPI application instance."""
    settings = settings or load_settings()
    setup_logging(settings.log_level)
    app = FastAPI(title=settings.app_name, debug=settings.debug)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:4200",
            "http://127.0.0.1:4200",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    store = build_profile_store(settings)
    service = ScoringService(store=store, settings=settings)
    app.state.profile_store = store
    app.state.scoring_service = service

    app.include_router(build_router(settings))
    app.include_router(build_scoring_router(store, service))

    logger.info("Application initialized: %s", settings.app_name)
    return app


app = create_app()


def run() -> None:
    """Start the ASGI server for local development."""
    settings = load_settings()
    try:
        uvicorn.run("loan_risk.main:app", host=settings.host, port=settings.port, reload=settings.debug)
    except Exception:
        logger.exception("Failed to start uvicorn server.")
        raise


if __name__ == "__main__":
    run()
