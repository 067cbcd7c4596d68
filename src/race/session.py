"""
A RaceSession is what the service layer works with: one player's trip from the menu, through character selection, to the race.

It owns the draft and the race and decides which screen is active.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Self

from src.core.exceptions import GameStateError, InvalidRequestError, NotYourTurnError
from src.core.models import SessionModel
from src.core.shared_types import OPPONENT_SEAT, SEATS, OpponentType, Screen
from src.race.draft import SNAKE_ORDER, Draft
from src.race.opponent import OpponentPolicy
from src.race.race import ActionParams, ActionResult, Race, Racer
from src.race.roster import Character, lookup_character

logger = logging.getLogger(__name__)


@dataclass
class RaceSession:
    screen: Screen
    player_name: str
    opponent_type: OpponentType
    catalog: dict[int, Character]
    draft: Draft
    race: Optional[Race] = None

    @classmethod
    def new(
        cls,
        player_name: str,
        opponent_type: OpponentType,
        catalog: dict[int, Character],
        pool: Optional[list[int]] = None,
    ) -> Self:
        """A session starts on the menu screen."""
        character_pool = list(catalog) if pool is None else list(pool)
        for character_id in character_pool:
            lookup_character(catalog, character_id)
        if len(character_pool) < len(SNAKE_ORDER):
            # every seat must be able to field a full team
            raise InvalidRequestError(
                f"Character pool needs at least {len(SNAKE_ORDER)} riders, got {len(character_pool)}."
            )
        return cls(
            screen=Screen.MENU,
            player_name=player_name,
            opponent_type=opponent_type,
            catalog=catalog,
            draft=Draft(pool=character_pool),
        )

    @classmethod
    def from_model(cls, model: SessionModel, catalog: dict[int, Character]) -> Self:
        """Define how to construct a RaceSession from the information the Service layer actually has"""

        # Validation
        if model.screen not in {screen.value for screen in Screen}:
            raise GameStateError(
                f"Invalid screen: {model.screen!r}. \nPick one from {','.join(Screen)}"
            )
        if model.opponent_type not in {kind.value for kind in OpponentType}:
            raise GameStateError(
                f"Invalid opponent type: {model.opponent_type!r}. \nPick one from {','.join(OpponentType)}"
            )

        draft = Draft(pool=list(model.character_pool), picks=list(model.draft_picks))
        race = None
        if model.race_started:
            teams: list[list[Racer]] = [[] for _ in SEATS]
            for record in model.racers:
                character = lookup_character(catalog, int(record["character_id"]))
                player = int(record["player"])
                teams[player].append(
                    Racer(
                        character=character,
                        player=player,
                        position=int(record["position"]),
                        current_stamina=float(record["current_stamina"]),
                    )
                )
            race = Race(
                teams=teams,
                current_turn=model.current_turn,
                turn_number=model.turn_number,
                weather=model.weather,
                log=list(model.game_log),
            )

        return cls(
            screen=Screen(model.screen),
            player_name=model.player_name,
            opponent_type=OpponentType(model.opponent_type),
            catalog=catalog,
            draft=draft,
            race=race,
        )

    def to_model(self) -> SessionModel:
        """Encode back into a format the Service layer uses"""
        model = SessionModel(
            screen=str(self.screen),
            player_name=self.player_name,
            opponent_type=str(self.opponent_type),
            character_pool=list(self.draft.pool),
            draft_picks=list(self.draft.picks),
        )
        if self.race is not None:
            model.race_started = True
            model.racers = [
                {
                    "character_id": racer.character.id,
                    "player": racer.player,
                    "position": racer.position,
                    "current_stamina": racer.current_stamina,
                }
                for team in self.race.teams
                for racer in team
            ]
            model.current_turn = self.race.current_turn
            model.turn_number = self.race.turn_number
            model.weather = self.race.weather
            model.game_log = list(self.race.log)
        return model

    @property
    def has_ai_opponent(self) -> bool:
        return self.opponent_type == OpponentType.AI

    @property
    def opponent_due(self) -> bool:
        """Is the AI expected to act right now?"""
        if not self.has_ai_opponent:
            return False
        if self.screen == Screen.CHARACTER_SELECT:
            return self.draft.current_player == OPPONENT_SEAT
        if self.screen == Screen.GAME and self.race is not None:
            return self.race.current_turn == OPPONENT_SEAT and bool(
                self.race.team(OPPONENT_SEAT)
            )
        return False

    # --- SCREEN FLOW ---
    def start_new_game(self) -> None:
        """Leave the menu and open a fresh character selection."""
        self._assert_screen(Screen.MENU)
        self.draft = Draft(pool=list(self.draft.pool))
        self.race = None
        self.screen = Screen.CHARACTER_SELECT

    def return_to_menu(self) -> None:
        self.screen = Screen.MENU

    # --- CHARACTER SELECTION ---
    def pick_character(self, seat: int, character_id: int) -> None:
        """A human pick. With an AI opponent, only the local seat can be picked for."""
        self._assert_screen(Screen.CHARACTER_SELECT)
        self._assert_human_seat(seat)
        self._record_pick(seat, character_id)

    def opponent_pick(self, policy: OpponentPolicy) -> Optional[int]:
        """Let the AI pick. Returns None when nothing is left to pick from."""
        self._assert_screen(Screen.CHARACTER_SELECT)
        self._assert_ai_opponent()
        if self.draft.current_player != OPPONENT_SEAT:
            raise NotYourTurnError("It is not the opponent's turn to pick.")

        choice = policy.choose_character(OPPONENT_SEAT, self.draft.available())
        if choice is None:
            return None
        self._record_pick(OPPONENT_SEAT, choice)
        return choice

    # --- RACE ---
    def execute_action(
        self, seat: int, action: str, params: ActionParams
    ) -> ActionResult:
        race = self._active_race()
        self._assert_human_seat(seat)
        return race.execute_action(seat, action, params)

    def opponent_move(self, policy: OpponentPolicy) -> Optional[ActionResult]:
        """Let the AI act with a random rider. Returns None when the AI has no riders."""
        race = self._active_race()
        self._assert_ai_opponent()
        if race.current_turn != OPPONENT_SEAT:
            raise NotYourTurnError("It is not the opponent's turn.")

        decision = policy.choose_action(race.team(OPPONENT_SEAT))
        if decision is None:
            return None
        _, action, params = decision
        return race.execute_action(OPPONENT_SEAT, action, params)

    # -- PRIVATE HELPERS ---
    def _record_pick(self, seat: int, character_id: int) -> None:
        self.draft.pick(seat, character_id)
        logger.debug("Seat %s picked character %s", seat, character_id)
        if self.draft.is_complete:
            self._start_race()

    def _start_race(self) -> None:
        teams = {
            seat: [
                lookup_character(self.catalog, character_id)
                for character_id in self.draft.picks_for(seat)
            ]
            for seat in SEATS
        }
        self.race = Race.start(teams)
        self.screen = Screen.GAME
        logger.info("Character selection complete, race started for %s", self.player_name)

    def _active_race(self) -> Race:
        self._assert_screen(Screen.GAME)
        if self.race is None:
            raise GameStateError("No race has been started.")
        return self.race

    def _assert_screen(self, expected: Screen) -> None:
        if self.screen != expected:
            raise GameStateError(
                f"Operation only allowed on the {expected} screen. screen: {self.screen}"
            )

    def _assert_human_seat(self, seat: int) -> None:
        if seat == OPPONENT_SEAT and self.has_ai_opponent:
            raise GameStateError("The opponent seat is controlled by the AI.")

    def _assert_ai_opponent(self) -> None:
        if not self.has_ai_opponent:
            raise GameStateError("This session has a human opponent.")
