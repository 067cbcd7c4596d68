"""Simple AI opponent: picks riders and actions at random."""

import random
from dataclasses import dataclass, field
from typing import Optional, Protocol

from src.core.shared_types import ActionType
from src.race.race import MOVE_SPACES, ActionParams, Racer

ACTIONS: tuple[ActionType, ...] = (
    ActionType.MOVE,
    ActionType.SWAP,
    ActionType.ABILITY,
    ActionType.REST,
)


class OpponentPolicy(Protocol):
    """What an automated opponent must be able to decide."""

    def choose_character(self, seat: int, available: list[int]) -> Optional[int]: ...

    def choose_action(
        self, team: list[Racer]
    ) -> Optional[tuple[Racer, ActionType, ActionParams]]: ...


@dataclass
class RandomOpponent:
    rng: random.Random = field(default_factory=random.Random)

    def choose_character(self, seat: int, available: list[int]) -> Optional[int]:
        if not available:
            return None
        return self.rng.choice(available)

    def choose_action(
        self, team: list[Racer]
    ) -> Optional[tuple[Racer, ActionType, ActionParams]]:
        if not team:
            return None

        racer = self.rng.choice(team)
        action = self.rng.choice(ACTIONS)
        params = ActionParams(character_id=racer.character.id)

        if action == ActionType.SWAP:
            teammates = [r for r in team if r.character.id != racer.character.id]
            if teammates:
                params.target_character_id = self.rng.choice(teammates).character.id
            else:
                action = ActionType.MOVE
        elif action == ActionType.ABILITY:
            if racer.character.abilities:
                params.ability_index = self.rng.randrange(len(racer.character.abilities))
            else:
                action = ActionType.MOVE

        if action == ActionType.MOVE:
            params.spaces = self.rng.choice(MOVE_SPACES)

        return racer, action, params
