"""
Snake draft: the two seats take turns picking riders from a shared pool.

The pick order is a fixed pattern (1-2-2-1 style) that is walked linearly. A rider can be picked once.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from src.core.exceptions import (
    CharacterUnavailableError,
    DraftError,
    NotYourTurnError,
    UnknownCharacterError,
)
from src.core.shared_types import PLAYER_SEAT

SNAKE_ORDER: tuple[int, ...] = (0, 1, 1, 0, 0, 1)

# choose(seat, available_ids) -> picked id
Chooser = Callable[[int, list[int]], int]


def walk_draft(
    order: Sequence[int], pool: Sequence[int], choose: Chooser
) -> dict[int, list[int]]:
    """
    Assign every step in `order` to its seat.
    ----

    Already chosen ids are skipped. When nothing is left for a step, that step produces no pick.
    Stops after len(order) steps.
    """
    assigned: dict[int, list[int]] = {seat: [] for seat in order}
    taken: set[int] = set()
    for seat in order:
        available = [character_id for character_id in pool if character_id not in taken]
        if not available:
            continue
        choice = choose(seat, available)
        if choice not in available:
            raise CharacterUnavailableError(
                f"Seat {seat} chose {choice}, which is not available."
            )
        taken.add(choice)
        assigned[seat].append(choice)
    return assigned


@dataclass
class Draft:
    pool: list[int]
    picks: list[int] = field(default_factory=list)
    order: tuple[int, ...] = SNAKE_ORDER

    @property
    def phase(self) -> int:
        return len(self.picks)

    @property
    def is_complete(self) -> bool:
        return self.phase >= len(self.order) or not self.available()

    @property
    def current_player(self) -> Optional[int]:
        if self.is_complete:
            return None
        return self.order[self.phase]

    def available(self) -> list[int]:
        return [character_id for character_id in self.pool if character_id not in self.picks]

    def picks_for(self, seat: int) -> list[int]:
        return [
            character_id
            for index, character_id in enumerate(self.picks)
            if self.order[index] == seat
        ]

    def selected_by(self, character_id: int) -> Optional[int]:
        if character_id not in self.picks:
            return None
        return self.order[self.picks.index(character_id)]

    def pick(self, seat: int, character_id: int) -> None:
        """Record a pick for `seat`, validating turn order and availability."""
        if self.is_complete:
            raise DraftError("Character selection is already complete.")

        if seat != self.current_player:
            raise NotYourTurnError(
                f"It is not your turn to pick. Waiting for seat {self.current_player}."
            )

        if character_id not in self.pool:
            raise UnknownCharacterError(
                f"Character {character_id} is not part of this draft."
            )

        if character_id in self.picks:
            raise CharacterUnavailableError(
                f"Character {character_id} has already been selected."
            )

        self.picks.append(character_id)

    # -- Texts shown on the selection screen --
    def selection_info(self) -> str:
        if self.is_complete:
            return "選擇完成！"
        player_text = "您的選擇" if self.current_player == PLAYER_SEAT else "對手選擇"
        return f"第 {self.phase + 1} 輪選擇: {player_text}"

    def selection_status(self, character_id: int) -> str:
        seat = self.selected_by(character_id)
        if seat is None:
            return ""
        selected_by = "您" if seat == PLAYER_SEAT else "對手"
        return f"{selected_by}的選擇"
