"""Application entrypoint: FastAPI app with routes, error mapping and the opponent scheduler lifecycle."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from src.api.routes import opponent_scheduler, router
from src.core.config import get_settings
from src.core.exceptions import (
    DraftError,
    GameError,
    GameStateError,
    InvalidActionError,
    InvalidRequestError,
    NotYourTurnError,
    RepositoryError,
    SessionNotFoundError,
    UnknownCharacterError,
)
from src.core.logging_config import setup_logging
from src.db.database import create_tables

logger = logging.getLogger(__name__)

# Most specific first: the first matching entry wins.
ERROR_STATUS: list[tuple[type[GameError], int]] = [
    (SessionNotFoundError, status.HTTP_404_NOT_FOUND),
    (NotYourTurnError, status.HTTP_409_CONFLICT),
    (GameStateError, status.HTTP_409_CONFLICT),
    (UnknownCharacterError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (DraftError, status.HTTP_409_CONFLICT),
    (InvalidActionError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (InvalidRequestError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (RepositoryError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def status_for(error: GameError) -> int:
    return next(
        (code for error_type, code in ERROR_STATUS if isinstance(error, error_type)),
        status.HTTP_400_BAD_REQUEST,
    )


async def handle_game_error(request: Request, exc: Exception) -> JSONResponse:
    code = status_for(exc) if isinstance(exc, GameError) else status.HTTP_400_BAD_REQUEST
    logger.info("%s %s -> %s: %s", request.method, request.url.path, code, exc)
    return JSONResponse(
        status_code=code,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and run the opponent scheduler while the server is up."""
    create_tables()
    opponent_scheduler.start()
    try:
        yield
    finally:
        opponent_scheduler.shutdown()
        logger.info("Stop Server")


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)
    app = FastAPI(title=settings.app_name, version=settings.version, lifespan=lifespan)
    app.add_exception_handler(GameError, handle_game_error)
    app.include_router(router)
    return app


app = create_app()


def run() -> None:
    """Console entrypoint: serve the app with uvicorn."""
    settings = get_settings()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
