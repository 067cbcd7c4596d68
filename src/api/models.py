"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import SEATS, ActionType, OpponentType, Screen
from src.race.draft import SNAKE_ORDER


def _validate_seat(value: int) -> int:
    if value not in SEATS:
        raise InvalidRequestError(f"Seat must be one of {SEATS}, got {value}.")
    return value


# --- REQUEST MODELS ---
class CreateSessionRequest(BaseModel):
    opponent_type: Optional[OpponentType] = None
    character_ids: Optional[list[int]] = None

    @field_validator("character_ids")
    @classmethod
    def validate_character_ids(cls, value: Optional[list[int]]) -> Optional[list[int]]:
        if value is None:
            return value
        if len(set(value)) != len(value):
            raise InvalidRequestError("Character pool must not contain duplicates.")
        if len(value) < len(SNAKE_ORDER):
            raise InvalidRequestError(
                f"Character pool needs at least {len(SNAKE_ORDER)} riders, got {len(value)}."
            )
        return value


class GetSessionRequest(BaseModel):
    session_id: UUID


class StartGameRequest(BaseModel):
    session_id: UUID


class PickRequest(BaseModel):
    session_id: UUID
    player: int = 0
    character_id: int

    @field_validator("player")
    @classmethod
    def validate_player(cls, value: int) -> int:
        return _validate_seat(value)


class ActionRequest(BaseModel):
    session_id: UUID
    player: int = 0
    action: ActionType
    character_id: int
    spaces: Optional[int] = None
    target_character_id: Optional[int] = None
    ability_index: Optional[int] = None

    @field_validator("player")
    @classmethod
    def validate_player(cls, value: int) -> int:
        return _validate_seat(value)


class OpponentTurnRequest(BaseModel):
    session_id: UUID


class ReturnToMenuRequest(BaseModel):
    session_id: UUID


class DeleteSessionRequest(BaseModel):
    session_id: UUID


class UpdatePreferencesRequest(BaseModel):
    player_name: str

    @field_validator("player_name")
    @classmethod
    def validate_player_name(cls, value: str) -> str:
        name = value.strip()
        if not name:
            raise InvalidRequestError("Player name cannot be empty.")
        return name


# --- RESPONSE MODELS ---
class CharacterResponse(BaseModel):
    id: int
    name: str
    initial: str
    type: str
    stamina: int
    abilities: list[str]


class ActionOptionResponse(BaseModel):
    action: ActionType
    label: str


class TrackResponse(BaseModel):
    name: str
    length: int


class PreferencesResponse(BaseModel):
    player_name: str


class VersionResponse(BaseModel):
    app_name: str
    version: str


class DraftResponse(BaseModel):
    phase: int
    current_player: Optional[int]
    is_complete: bool
    selection_info: str
    available: list[int]
    player_picks: list[int]
    opponent_picks: list[int]


class RacerResponse(BaseModel):
    character_id: int
    name: str
    type: str
    player: int
    position: int
    position_label: str
    current_stamina: float
    max_stamina: int
    stamina_ratio: float


class RaceResponse(BaseModel):
    current_turn: int
    turn_number: int
    weather: str
    is_player_turn: bool
    teams: list[list[RacerResponse]]
    game_log: list[str]


class SessionResponse(BaseModel):
    session_id: UUID
    screen: Screen
    player_name: str
    opponent_type: OpponentType
    opponent_due: bool
    draft: DraftResponse
    race: Optional[RaceResponse]


class ActionResponse(BaseModel):
    success: bool
    message: str
    session: SessionResponse
