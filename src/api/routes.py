"""HTTP routes. Thin wrappers that hand requests to the RaceService."""

import logging
from uuid import UUID

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from src.api.models import (
    ActionOptionResponse,
    ActionRequest,
    ActionResponse,
    CharacterResponse,
    CreateSessionRequest,
    DeleteSessionRequest,
    GetSessionRequest,
    OpponentTurnRequest,
    PickRequest,
    PreferencesResponse,
    ReturnToMenuRequest,
    SessionResponse,
    StartGameRequest,
    TrackResponse,
    UpdatePreferencesRequest,
    VersionResponse,
)
from src.core.config import get_settings
from src.core.exceptions import GameError
from src.db.database import SessionLocal, get_db
from src.db.sql_repository import SQLPreferenceRepository, SQLSessionRepository
from src.services.opponent_scheduler import OpponentScheduler
from src.services.race_service import RaceService
from src.services.session_locks import SessionLocks

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")
opponent_scheduler = OpponentScheduler(AsyncIOScheduler())
session_locks = SessionLocks()


def build_service(db: Session) -> RaceService:
    return RaceService(SQLSessionRepository(db), SQLPreferenceRepository(db))


def get_service(db: Session = Depends(get_db)) -> RaceService:
    return build_service(db)


def run_opponent_turn(session_id: UUID) -> None:
    """Scheduled job: let the AI act, then queue its next turn if it moves again (e.g. back-to-back draft picks)."""
    with SessionLocal() as db, session_locks.hold(session_id):
        service = build_service(db)
        try:
            service.opponent_turn(OpponentTurnRequest(session_id=session_id))
        except GameError as e:
            logger.warning("Opponent turn for session %s skipped: %s", session_id, e)
            return
        schedule_opponent(service, session_id)


def schedule_opponent(service: RaceService, session_id: UUID) -> None:
    """Queue the AI's next turn, or drop a pending one when the AI is no longer due."""
    delay = service.opponent_delay(session_id)
    if delay is None:
        opponent_scheduler.cancel(session_id)
        return
    opponent_scheduler.schedule(session_id, delay, run_opponent_turn)


# --- CATALOGUE / PREFERENCES ---
@router.get("/version", response_model=VersionResponse)
def version() -> VersionResponse:
    settings = get_settings()
    return VersionResponse(app_name=settings.app_name, version=settings.version)


@router.get("/characters", response_model=list[CharacterResponse])
def list_characters(service: RaceService = Depends(get_service)) -> list[CharacterResponse]:
    return service.list_characters()


@router.get("/actions", response_model=list[ActionOptionResponse])
def list_actions(service: RaceService = Depends(get_service)) -> list[ActionOptionResponse]:
    return service.list_actions()


@router.get("/track", response_model=TrackResponse)
def get_track(service: RaceService = Depends(get_service)) -> TrackResponse:
    return service.get_track()


@router.get("/preferences", response_model=PreferencesResponse)
def get_preferences(service: RaceService = Depends(get_service)) -> PreferencesResponse:
    return service.get_preferences()


@router.put("/preferences", response_model=PreferencesResponse)
def update_preferences(
    request: UpdatePreferencesRequest, service: RaceService = Depends(get_service)
) -> PreferencesResponse:
    return service.update_player_name(request)


# --- SESSIONS ---
@router.post("/sessions", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def create_session(
    request: CreateSessionRequest, service: RaceService = Depends(get_service)
) -> SessionResponse:
    return service.create_session(request)


@router.get("/sessions/{session_id}", response_model=SessionResponse)
def get_session(session_id: UUID, service: RaceService = Depends(get_service)) -> SessionResponse:
    return service.get_session(GetSessionRequest(session_id=session_id))


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(session_id: UUID, service: RaceService = Depends(get_service)) -> None:
    with session_locks.hold(session_id):
        opponent_scheduler.cancel(session_id)
        service.delete_session(DeleteSessionRequest(session_id=session_id))
    session_locks.discard(session_id)


@router.post("/sessions/start", response_model=SessionResponse)
def start_new_game(
    request: StartGameRequest, service: RaceService = Depends(get_service)
) -> SessionResponse:
    with session_locks.hold(request.session_id):
        response = service.start_new_game(request)
        schedule_opponent(service, request.session_id)
    return response


@router.post("/sessions/picks", response_model=SessionResponse)
def pick_character(
    request: PickRequest, service: RaceService = Depends(get_service)
) -> SessionResponse:
    with session_locks.hold(request.session_id):
        response = service.pick_character(request)
        schedule_opponent(service, request.session_id)
    return response


@router.post("/sessions/actions", response_model=ActionResponse)
def execute_action(
    request: ActionRequest, service: RaceService = Depends(get_service)
) -> ActionResponse:
    with session_locks.hold(request.session_id):
        response = service.execute_action(request)
        schedule_opponent(service, request.session_id)
    return response


@router.post("/sessions/opponent", response_model=SessionResponse)
def opponent_turn(
    request: OpponentTurnRequest, service: RaceService = Depends(get_service)
) -> SessionResponse:
    """Make the AI act immediately, skipping its thinking delay."""
    with session_locks.hold(request.session_id):
        opponent_scheduler.cancel(request.session_id)
        response = service.opponent_turn(request)
        schedule_opponent(service, request.session_id)
    return response


@router.post("/sessions/menu", response_model=SessionResponse)
def return_to_menu(
    request: ReturnToMenuRequest, service: RaceService = Depends(get_service)
) -> SessionResponse:
    with session_locks.hold(request.session_id):
        opponent_scheduler.cancel(request.session_id)
        return service.return_to_menu(request)
