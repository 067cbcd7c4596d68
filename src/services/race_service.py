"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
from typing import Optional
from uuid import UUID

from src.api.models import (
    ActionOptionResponse,
    ActionRequest,
    ActionResponse,
    CharacterResponse,
    CreateSessionRequest,
    DeleteSessionRequest,
    DraftResponse,
    GetSessionRequest,
    OpponentTurnRequest,
    PickRequest,
    PreferencesResponse,
    RaceResponse,
    RacerResponse,
    ReturnToMenuRequest,
    SessionResponse,
    StartGameRequest,
    TrackResponse,
    UpdatePreferencesRequest,
)
from src.core.config import Settings, get_settings
from src.core.exceptions import GameStateError, SessionNotFoundError
from src.core.models import SessionModel
from src.core.shared_types import ACTION_LABELS, OPPONENT_SEAT, PLAYER_SEAT, Screen
from src.db.repository import PreferenceRepository, SessionRepository
from src.race.opponent import OpponentPolicy, RandomOpponent
from src.race.race import ActionParams, Race, Racer
from src.race.roster import Character, build_catalog, build_roster, default_track
from src.race.session import RaceSession

logger = logging.getLogger(__name__)

PLAYER_NAME_KEY = "playerName"


class RaceService:
    """Orchestration of layers for the cycling race game."""

    def __init__(
        self,
        repository: SessionRepository,
        preferences: PreferenceRepository,
        settings: Optional[Settings] = None,
        policy: Optional[OpponentPolicy] = None,
        roster: Optional[list[Character]] = None,
    ) -> None:
        self.repo = repository
        self.preferences = preferences
        self.settings = settings or get_settings()
        self.policy = policy or RandomOpponent()
        self.catalog = build_catalog(
            roster if roster is not None else build_roster(self.settings.starting_stamina)
        )

    # -- Catalogue / preferences --
    def list_characters(self) -> list[CharacterResponse]:
        return [
            CharacterResponse(
                id=character.id,
                name=character.name,
                initial=character.initial,
                type=character.type,
                stamina=character.stats.stamina,
                abilities=[ability.name for ability in character.abilities],
            )
            for character in self.catalog.values()
        ]

    def list_actions(self) -> list[ActionOptionResponse]:
        """Actions a rider can take on the board, with their display labels."""
        return [
            ActionOptionResponse(action=action, label=label)
            for action, label in ACTION_LABELS.items()
        ]

    def get_track(self) -> TrackResponse:
        track = default_track(self.settings.track_name, self.settings.track_length)
        return TrackResponse(name=track.name, length=track.length)

    def get_preferences(self) -> PreferencesResponse:
        return PreferencesResponse(player_name=self._player_name())

    def update_player_name(self, request: UpdatePreferencesRequest) -> PreferencesResponse:
        stored = self.preferences.set_preference(PLAYER_NAME_KEY, request.player_name)
        return PreferencesResponse(player_name=stored)

    # -- API routes logic ---
    def create_session(self, request: CreateSessionRequest) -> SessionResponse:
        """Open a session on the menu screen, using the stored display name."""
        session = RaceSession.new(
            player_name=self._player_name(),
            opponent_type=request.opponent_type or self.settings.default_opponent_type,
            catalog=self.catalog,
            pool=request.character_ids,
        )
        stored, session_id = self.repo.create_session(session.to_model())
        logger.info("Session %s created for %s", session_id, stored.player_name)
        return self._create_session_response(session_id, session)

    def get_session(self, request: GetSessionRequest) -> SessionResponse:
        """
        Retrieve current session state.
        ----
        Used in "polling" loop by frontend to notice when the opponent has acted.
        """
        session = self._load(request.session_id)
        return self._create_session_response(request.session_id, session)

    def start_new_game(self, request: StartGameRequest) -> SessionResponse:
        """Menu -> character selection."""
        session = self._load(request.session_id)
        session.start_new_game()
        return self._save(request.session_id, session)

    def pick_character(self, request: PickRequest) -> SessionResponse:
        session = self._load(request.session_id)
        session.pick_character(request.player, request.character_id)
        return self._save(request.session_id, session)

    def execute_action(self, request: ActionRequest) -> ActionResponse:
        session = self._load(request.session_id)
        params = ActionParams(
            character_id=request.character_id,
            spaces=request.spaces,
            target_character_id=request.target_character_id,
            ability_index=request.ability_index,
        )
        result = session.execute_action(request.player, request.action, params)
        response = self._save(request.session_id, session)
        return ActionResponse(
            success=result.success, message=result.message, session=response
        )

    def opponent_turn(self, request: OpponentTurnRequest) -> SessionResponse:
        """The AI opponent picks a character or makes a move, depending on the screen."""
        session = self._load(request.session_id)
        if session.screen == Screen.CHARACTER_SELECT:
            session.opponent_pick(self.policy)
        elif session.screen == Screen.GAME:
            session.opponent_move(self.policy)
        else:
            raise GameStateError(
                f"Opponent cannot act on the {session.screen} screen."
            )
        return self._save(request.session_id, session)

    def return_to_menu(self, request: ReturnToMenuRequest) -> SessionResponse:
        session = self._load(request.session_id)
        session.return_to_menu()
        return self._save(request.session_id, session)

    def delete_session(self, request: DeleteSessionRequest) -> None:
        """Handle a request to delete a session record."""
        if self.repo.delete_session(request.session_id) is None:
            raise SessionNotFoundError(f"Session with {request.session_id=} not found.")

    def opponent_delay(self, session_id: UUID) -> Optional[float]:
        """Seconds the AI should wait before acting, or None if it is not the AI's turn."""
        session = self._load(session_id)
        if not session.opponent_due:
            return None
        if session.screen == Screen.CHARACTER_SELECT:
            return self.settings.draft_thinking_delay
        return self.settings.board_thinking_delay

    # -- Internal helpers --
    def _player_name(self) -> str:
        stored = self.preferences.get_preference(PLAYER_NAME_KEY)
        return stored or self.settings.default_player_name

    def _load(self, session_id: UUID) -> RaceSession:
        return RaceSession.from_model(self._fetch_session(session_id), self.catalog)

    def _save(self, session_id: UUID, session: RaceSession) -> SessionResponse:
        self.repo.update_session(session_id, session.to_model())
        return self._create_session_response(session_id, session)

    def _fetch_session(self, session_id: UUID) -> SessionModel:
        """Attempt to find the session in the repository and raise error if it fails."""
        session_model = self.repo.get_session(session_id)
        if session_model is None:
            raise SessionNotFoundError(f"Session with {session_id=} not found.")
        return session_model

    def _create_session_response(
        self, session_id: UUID, session: RaceSession
    ) -> SessionResponse:
        draft = session.draft
        return SessionResponse(
            session_id=session_id,
            screen=session.screen,
            player_name=session.player_name,
            opponent_type=session.opponent_type,
            opponent_due=session.opponent_due,
            draft=DraftResponse(
                phase=draft.phase,
                current_player=draft.current_player,
                is_complete=draft.is_complete,
                selection_info=draft.selection_info(),
                available=draft.available(),
                player_picks=draft.picks_for(PLAYER_SEAT),
                opponent_picks=draft.picks_for(OPPONENT_SEAT),
            ),
            race=self._create_race_response(session.race) if session.race else None,
        )

    @staticmethod
    def _create_race_response(race: Race) -> RaceResponse:
        def _racer(racer: Racer) -> RacerResponse:
            return RacerResponse(
                character_id=racer.character.id,
                name=racer.character.name,
                type=racer.character.type,
                player=racer.player,
                position=racer.position,
                position_label=racer.position_label,
                current_stamina=racer.current_stamina,
                max_stamina=racer.character.stats.stamina,
                stamina_ratio=racer.stamina_ratio,
            )

        state = race.get_game_state()
        return RaceResponse(
            current_turn=state.current_turn,
            turn_number=state.turn_number,
            weather=state.weather,
            is_player_turn=race.is_player_turn,
            teams=[[_racer(r) for r in team] for team in state.selected_characters],
            game_log=list(race.log),
        )
