"""Unit tests for src/services/race_service.py"""

from typing import Generator
from uuid import UUID, uuid4

import pytest

from src.core.config import Settings
from src.core.exceptions import (
    GameError,
    GameStateError,
    SessionNotFoundError,
    UnknownCharacterError,
)
from src.core.models import SessionModel
from src.core.shared_types import OpponentType, Screen
from src.services.race_service import (
    PLAYER_NAME_KEY,
    ActionRequest,
    ActionResponse,
    CreateSessionRequest,
    DeleteSessionRequest,
    GetSessionRequest,
    OpponentTurnRequest,
    PickRequest,
    RaceService,
    ReturnToMenuRequest,
    SessionResponse,
    StartGameRequest,
    UpdatePreferencesRequest,
)


# --- MOCK DEPENDENCIES ----
class MockRepository:
    """Mock the SessionRepository using a dictionary of session models."""

    def __init__(self) -> None:
        self._sessions: dict[UUID, SessionModel] = {}

    def create_session(self, session: SessionModel) -> tuple[SessionModel, UUID]:
        session_id = uuid4()
        self._sessions[session_id] = session
        return session, session_id

    def get_session(self, session_id: UUID) -> SessionModel | None:
        return self._sessions.get(session_id)

    def update_session(
        self, session_id: UUID, session: SessionModel
    ) -> SessionModel | None:
        if session_id not in self._sessions:
            return None
        self._sessions[session_id] = session
        return session

    def delete_session(self, session_id: UUID) -> SessionModel | None:
        return self._sessions.pop(session_id, None)

    def clear(self) -> None:
        """Clear the repository (useful in between tests)"""
        self._sessions.clear()


class MockPreferences:
    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    def get_preference(self, key: str) -> str | None:
        return self._values.get(key)

    def set_preference(self, key: str, value: str) -> str:
        self._values[key] = value
        return value


@pytest.fixture
def mock_repository() -> Generator[MockRepository, None, None]:
    """Ensures to clear the repository between tests"""
    repo = MockRepository()
    try:
        yield repo
    finally:
        repo.clear()


@pytest.fixture
def service(mock_repository: MockRepository, first_available) -> RaceService:
    return RaceService(
        mock_repository,
        MockPreferences(),
        settings=Settings(_env_file=None),
        policy=first_available,
    )


def start_draft(service: RaceService, opponent_type: OpponentType = OpponentType.AI) -> UUID:
    created = service.create_session(CreateSessionRequest(opponent_type=opponent_type))
    service.start_new_game(StartGameRequest(session_id=created.session_id))
    return created.session_id


def play_draft(service: RaceService, session_id: UUID) -> SessionResponse:
    """Player takes 1, 4, 5; the AI takes 2, 3, 6."""
    service.pick_character(PickRequest(session_id=session_id, character_id=1))
    service.opponent_turn(OpponentTurnRequest(session_id=session_id))
    service.opponent_turn(OpponentTurnRequest(session_id=session_id))
    service.pick_character(PickRequest(session_id=session_id, character_id=4))
    service.pick_character(PickRequest(session_id=session_id, character_id=5))
    return service.opponent_turn(OpponentTurnRequest(session_id=session_id))


# --- CATALOGUE / PREFERENCES ---
def test_list_characters(service: RaceService) -> None:
    characters = service.list_characters()
    assert len(characters) == 10
    assert characters[1].name == "山岳之王"
    assert characters[1].stamina == 100
    assert characters[1].abilities == []


def test_get_track(service: RaceService) -> None:
    track = service.get_track()
    assert (track.name, track.length) == ("隨機賽道", 30)


def test_list_actions(service: RaceService) -> None:
    actions = service.list_actions()
    assert [a.action for a in actions] == ["move", "swap", "ability", "rest"]
    assert [a.label for a in actions] == ["踩踏", "換位", "技能", "休息"]


def test_player_name_falls_back_to_default(service: RaceService) -> None:
    assert service.get_preferences().player_name == "玩家1"
    created = service.create_session(CreateSessionRequest())
    assert created.player_name == "玩家1"


def test_stored_player_name_is_used(service: RaceService) -> None:
    service.update_player_name(UpdatePreferencesRequest(player_name="  小明 "))
    assert service.preferences.get_preference(PLAYER_NAME_KEY) == "小明"
    assert service.create_session(CreateSessionRequest()).player_name == "小明"


# --- SESSIONS ---
def test_create_session(service: RaceService, mock_repository: MockRepository) -> None:
    response = service.create_session(CreateSessionRequest())

    assert isinstance(response, SessionResponse)
    assert isinstance(response.session_id, UUID)
    assert response.screen == Screen.MENU
    assert response.opponent_type == OpponentType.AI
    assert response.race is None
    assert response.draft.available == list(range(1, 11))

    stored = mock_repository.get_session(response.session_id)
    assert stored is not None
    assert stored.screen == "menu"
    assert not stored.race_started


def test_create_session_with_unknown_character(service: RaceService) -> None:
    with pytest.raises(UnknownCharacterError):
        service.create_session(CreateSessionRequest(character_ids=[1, 2, 3, 4, 5, 77]))


def test_get_unknown_session(service: RaceService) -> None:
    with pytest.raises(SessionNotFoundError):
        service.get_session(GetSessionRequest(session_id=uuid4()))


def test_start_new_game(service: RaceService) -> None:
    session_id = start_draft(service)
    response = service.get_session(GetSessionRequest(session_id=session_id))
    assert response.screen == Screen.CHARACTER_SELECT
    assert response.draft.current_player == 0
    assert response.draft.selection_info == "第 1 輪選擇: 您的選擇"


def test_full_draft_moves_to_game(service: RaceService) -> None:
    session_id = start_draft(service)
    response = play_draft(service, session_id)

    assert response.screen == Screen.GAME
    assert response.draft.is_complete
    assert response.draft.player_picks == [1, 4, 5]
    assert response.draft.opponent_picks == [2, 3, 6]
    assert response.race is not None
    assert [r.character_id for r in response.race.teams[0]] == [1, 4, 5]
    assert response.race.teams[0][0].position_label == "領先"
    assert response.race.teams[0][0].stamina_ratio == 1.0
    assert response.race.game_log == ["遊戲開始！準備在終點線前擊敗對手。"]
    assert response.race.is_player_turn


def test_pick_out_of_turn_is_propagated(service: RaceService) -> None:
    session_id = start_draft(service)
    service.pick_character(PickRequest(session_id=session_id, character_id=1))
    with pytest.raises(GameError):
        service.pick_character(PickRequest(session_id=session_id, character_id=2))


def test_execute_action(service: RaceService) -> None:
    session_id = start_draft(service)
    play_draft(service, session_id)

    response = service.execute_action(
        ActionRequest(session_id=session_id, action="move", character_id=1, spaces=2)
    )
    assert isinstance(response, ActionResponse)
    assert response.success
    assert response.message == "動作執行成功"
    assert response.session.opponent_due
    assert not response.session.race.is_player_turn

    after_ai = service.opponent_turn(OpponentTurnRequest(session_id=session_id))
    assert after_ai.race.is_player_turn
    assert after_ai.race.turn_number == 2
    assert after_ai.race.game_log[0] == "對手的 山岳之王 動作執行成功"


def test_invalid_action_is_not_persisted(
    service: RaceService, mock_repository: MockRepository
) -> None:
    session_id = start_draft(service)
    play_draft(service, session_id)

    with pytest.raises(GameError):
        service.execute_action(
            ActionRequest(session_id=session_id, action="move", character_id=1, spaces=5)
        )
    assert mock_repository.get_session(session_id).current_turn == 0


def test_opponent_cannot_act_on_menu(service: RaceService) -> None:
    created = service.create_session(CreateSessionRequest())
    with pytest.raises(GameStateError):
        service.opponent_turn(OpponentTurnRequest(session_id=created.session_id))


def test_human_opponent_draft(service: RaceService) -> None:
    session_id = start_draft(service, OpponentType.HUMAN)
    service.pick_character(PickRequest(session_id=session_id, character_id=1))
    response = service.pick_character(
        PickRequest(session_id=session_id, player=1, character_id=9)
    )
    assert response.draft.opponent_picks == [9]
    assert not response.opponent_due


def test_return_to_menu(service: RaceService) -> None:
    session_id = start_draft(service)
    response = service.return_to_menu(ReturnToMenuRequest(session_id=session_id))
    assert response.screen == Screen.MENU


def test_delete_session(service: RaceService, mock_repository: MockRepository) -> None:
    created = service.create_session(CreateSessionRequest())
    service.delete_session(DeleteSessionRequest(session_id=created.session_id))
    assert mock_repository.get_session(created.session_id) is None

    with pytest.raises(SessionNotFoundError):
        service.delete_session(DeleteSessionRequest(session_id=created.session_id))


# --- OPPONENT DELAY ---
def test_opponent_delay(service: RaceService) -> None:
    created = service.create_session(CreateSessionRequest())
    session_id = created.session_id
    assert service.opponent_delay(session_id) is None

    service.start_new_game(StartGameRequest(session_id=session_id))
    assert service.opponent_delay(session_id) is None

    service.pick_character(PickRequest(session_id=session_id, character_id=1))
    assert service.opponent_delay(session_id) == 1.0

    service.opponent_turn(OpponentTurnRequest(session_id=session_id))
    service.opponent_turn(OpponentTurnRequest(session_id=session_id))
    service.pick_character(PickRequest(session_id=session_id, character_id=4))
    service.pick_character(PickRequest(session_id=session_id, character_id=5))
    service.opponent_turn(OpponentTurnRequest(session_id=session_id))
    service.execute_action(
        ActionRequest(session_id=session_id, action="rest", character_id=5)
    )
    assert service.opponent_delay(session_id) == 1.5


def test_no_delay_for_human_opponent(service: RaceService) -> None:
    session_id = start_draft(service, OpponentType.HUMAN)
    service.pick_character(PickRequest(session_id=session_id, character_id=1))
    assert service.opponent_delay(session_id) is None
