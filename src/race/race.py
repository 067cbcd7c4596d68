"""
The Race is the entrypoint into the turn engine for the session layer.

It keeps track of whose turn it is, validates the actions a seat requests and records what happened in the game log.
Movement, stamina cost, abilities and weather effects are carried as data only: they are not simulated yet.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Self

from src.core.exceptions import InvalidActionError, NotYourTurnError
from src.core.shared_types import OPPONENT_SEAT, PLAYER_SEAT, SEATS, ActionType
from src.race.roster import Character

logger = logging.getLogger(__name__)

DEFAULT_WEATHER = "晴朗"
MOVE_SPACES = (1, 2, 3)
SUCCESS_MESSAGE = "動作執行成功"
OPENING_LOG_ENTRY = "遊戲開始！準備在終點線前擊敗對手。"

POSITION_LABELS: dict[int, str] = {0: "領先", 1: "中間"}
REAR_POSITION_LABEL = "後衛"


@dataclass
class Racer:
    character: Character
    player: int
    position: int  # formation slot within the team, 0 is the leader
    current_stamina: float

    @classmethod
    def fresh(cls, character: Character, player: int, position: int) -> Self:
        return cls(character, player, position, float(character.stats.stamina))

    @property
    def position_label(self) -> str:
        return POSITION_LABELS.get(self.position, REAR_POSITION_LABEL)

    @property
    def stamina_ratio(self) -> float:
        return self.current_stamina / self.character.stats.stamina


@dataclass
class ActionParams:
    character_id: int
    spaces: Optional[int] = None
    target_character_id: Optional[int] = None
    ability_index: Optional[int] = None


@dataclass(frozen=True)
class ActionResult:
    success: bool
    message: str


@dataclass
class RaceState:
    """Snapshot handed out to callers. Mutating it does not change the Race."""

    current_turn: int
    turn_number: int
    weather: str
    selected_characters: list[list[Racer]]


@dataclass
class Race:
    teams: list[list[Racer]]
    current_turn: int = PLAYER_SEAT
    turn_number: int = 1
    weather: str = DEFAULT_WEATHER
    log: list[str] = field(default_factory=list)  # newest entry first

    @classmethod
    def start(cls, teams: dict[int, list[Character]]) -> Self:
        """Line up both teams in pick order and open the game log."""
        lined_up = [
            [
                Racer.fresh(character, seat, position)
                for position, character in enumerate(teams.get(seat, []))
            ]
            for seat in SEATS
        ]
        race = cls(teams=lined_up)
        race._add_to_log(OPENING_LOG_ENTRY)
        return race

    @property
    def is_player_turn(self) -> bool:
        return self.current_turn == PLAYER_SEAT

    def get_game_state(self) -> RaceState:
        return RaceState(
            current_turn=self.current_turn,
            turn_number=self.turn_number,
            weather=self.weather,
            selected_characters=[list(team) for team in self.teams],
        )

    def team(self, player: int) -> list[Racer]:
        return self.teams[player]

    def find_racer(self, player: int, character_id: int) -> Racer:
        racer = next(
            (r for r in self.teams[player] if r.character.id == character_id), None
        )
        if racer is None:
            raise InvalidActionError(
                f"Character {character_id} is not on seat {player}'s team."
            )
        return racer

    def execute_action(
        self, player: int, action: str, params: ActionParams
    ) -> ActionResult:
        """
        Attempt an action for the given seat
        -----

        1. check it is the seat's turn
        2. validate the action type and its parameters
        3. log the result
        4. pass the turn on
        """
        self._assert_your_turn(player)

        action_type = self._parse_action(action)
        racer = self.find_racer(player, params.character_id)
        self._validate_params(player, racer, action_type, params)

        result = ActionResult(success=True, message=SUCCESS_MESSAGE)
        self._log_result(player, racer, result)
        logger.debug(
            "Seat %s: %s %s (turn %s)",
            player,
            racer.character.name,
            action_type,
            self.turn_number,
        )

        self._advance_turn()
        return result

    # -- PRIVATE HELPERS ---
    def _assert_your_turn(self, player: int) -> None:
        if player not in SEATS:
            raise InvalidActionError(f"Unknown seat: {player}")
        if player != self.current_turn:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for seat {self.current_turn} to act first."
            )

    @staticmethod
    def _parse_action(action: str) -> ActionType:
        try:
            return ActionType(action)
        except ValueError as e:
            raise InvalidActionError(
                f"Unknown action {action!r}. Pick one from {', '.join(ActionType)}."
            ) from e

    def _validate_params(
        self, player: int, racer: Racer, action: ActionType, params: ActionParams
    ) -> None:
        match action:
            case ActionType.MOVE:
                if params.spaces not in MOVE_SPACES:
                    raise InvalidActionError(
                        f"Move distance must be one of {MOVE_SPACES}, got {params.spaces}."
                    )
            case ActionType.SWAP:
                if params.target_character_id is None:
                    raise InvalidActionError("Swap requires a teammate to swap with.")
                if params.target_character_id == racer.character.id:
                    raise InvalidActionError("Cannot swap a rider with itself.")
                self.find_racer(player, params.target_character_id)
            case ActionType.ABILITY:
                abilities = racer.character.abilities
                if params.ability_index is None or not (
                    0 <= params.ability_index < len(abilities)
                ):
                    raise InvalidActionError(
                        f"{racer.character.name} has no ability at index {params.ability_index}."
                    )
            case ActionType.REST:
                pass

    def _log_result(self, player: int, racer: Racer, result: ActionResult) -> None:
        if player == OPPONENT_SEAT:
            self._add_to_log(f"對手的 {racer.character.name} {result.message}")
        else:
            self._add_to_log(result.message)

    def _add_to_log(self, message: str) -> None:
        self.log.insert(0, message)

    def _advance_turn(self) -> None:
        """Seats alternate; a new turn number starts once both seats have acted."""
        if self.current_turn == OPPONENT_SEAT:
            self.turn_number += 1
        self.current_turn = OPPONENT_SEAT if self.current_turn == PLAYER_SEAT else PLAYER_SEAT
