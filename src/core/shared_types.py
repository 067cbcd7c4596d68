"""
Type definitions used across layers
"""

from enum import StrEnum

# Seat indices. The local player always sits at 0, the opponent at 1.
PLAYER_SEAT = 0
OPPONENT_SEAT = 1
SEATS = (PLAYER_SEAT, OPPONENT_SEAT)


class Screen(StrEnum):
    MENU = "menu"
    CHARACTER_SELECT = "character-select"
    GAME = "game"


class OpponentType(StrEnum):
    AI = "ai"
    HUMAN = "human"


class ActionType(StrEnum):
    MOVE = "move"
    SWAP = "swap"
    ABILITY = "ability"
    REST = "rest"


ACTION_LABELS: dict[ActionType, str] = {
    ActionType.MOVE: "踩踏",
    ActionType.SWAP: "換位",
    ActionType.ABILITY: "技能",
    ActionType.REST: "休息",
}
