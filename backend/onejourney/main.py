import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from onejourney.config import Settings, configure_logging
from onejourney.routes import (
    assistant_router,
    challenges_router,
    health_router,
    optimize_router,
    wallet_router,
)
from onejourney.services.assistant_service import AssistantService, build_assistant_client
from onejourney.services.errors import ServiceError, error_payload
from onejourney.services.route_source import RouteSourceService, build_route_source
from onejourney.state import AppState, create_app_state

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler - runs on startup and shutdown"""
    settings: Settings = app.state.settings
    state: AppState = app.state.onejourney
    route_source: RouteSourceService = app.state.route_source
    assistant: AssistantService = app.state.assistant

    logger.info("OneJourney server starting on http://localhost:%s", settings.port)
    logger.info("Wallet balance: %s", state.wallet.balance)
    logger.info("OpenRouter API: %s", "configured" if assistant.available else "missing")
    logger.info(
        "Google Maps API: %s",
        "configured (using real routes)" if route_source.directions is not None else "missing (using mock data)",
    )
    logger.info("Weekly challenges active until %s", state.challenges.week_end.isoformat())
    yield
    directions = route_source.directions
    if directions is not None and hasattr(directions, "close"):
        directions.close()


def create_app(
    settings: Optional[Settings] = None,
    state: Optional[AppState] = None,
    route_source: Optional[RouteSourceService] = None,
    assistant: Optional[AssistantService] = None,
) -> FastAPI:
    """Build the API with its collaborators; anything not passed in is built from settings."""
    if settings is None:
        load_dotenv()
        settings = Settings.from_env()
        configure_logging(settings.log_level)

    app = FastAPI(
        title="OneJourney Smart Mobility API",
        version="0.1.0",
        docs_url="/api/docs",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.onejourney = state or create_app_state(initial_balance=settings.initial_balance)
    app.state.route_source = route_source or build_route_source(settings)
    app.state.assistant = assistant or AssistantService(
        build_assistant_client(settings), model=settings.llm_model
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):  # type: ignore[override]
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):  # type: ignore[override]
        """Handle validation errors with HTTP 400 to match the rest of the error contract."""
        return JSONResponse(
            status_code=400,
            content=error_payload(
                "VALIDATION_ERROR",
                "Invalid request payload.",
                {"errors": jsonable_encoder(exc.errors())},
            ),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):  # type: ignore[override]
        """Handle general exceptions - log and return 500 error"""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=error_payload("INTERNAL_SERVER_ERROR", "Internal server error."),
        )

    app.include_router(optimize_router)
    app.include_router(wallet_router)
    app.include_router(challenges_router)
    app.include_router(assistant_router)
    app.include_router(health_router)

    # Front-end bundle, when one is deployed next to the API.
    if settings.static_dir and os.path.isdir(settings.static_dir):
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")

    return app


def run(host: Optional[str] = None, port: Optional[int] = None) -> None:
    import uvicorn

    load_dotenv()
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    uvicorn.run(create_app(settings), host=host or settings.host, port=port or settings.port)


app = create_app()


if __name__ == "__main__":
    run()
