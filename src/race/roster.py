"""Defines the riders that can be drafted and the track they race on"""

from dataclasses import dataclass, field
from typing import Iterable

from src.core.exceptions import UnknownCharacterError

DEFAULT_STAMINA = 100


@dataclass(frozen=True)
class Ability:
    name: str
    description: str = ""


@dataclass(frozen=True)
class CharacterStats:
    stamina: int = DEFAULT_STAMINA


@dataclass(frozen=True)
class Character:
    id: int
    name: str
    type: str
    stats: CharacterStats = field(default_factory=CharacterStats)
    abilities: tuple[Ability, ...] = ()

    @property
    def initial(self) -> str:
        """First character of the name, used as a placeholder avatar."""
        return self.name[:1]


@dataclass(frozen=True)
class Track:
    name: str
    length: int


# (name, rider type) in roster order. Ids are assigned 1..N.
_ROSTER_ENTRIES: tuple[tuple[str, str], ...] = (
    ("飆風劍客", "全能型車手"),
    ("山岳之王", "爬坡專家"),
    ("閃電追擊", "衝刺手"),
    ("風之守護", "破風手"),
    ("戰術大師", "策略型車手"),
    ("耐力機器", "長距離選手"),
    ("技巧達人", "技術型車手"),
    ("補給專家", "支援型車手"),
    ("下坡狂人", "速降專家"),
    ("混亂製造者", "干擾型車手"),
)


def build_roster(stamina: int = DEFAULT_STAMINA) -> list[Character]:
    """The default riders, all starting with the same stamina."""
    return [
        Character(id=index, name=name, type=rider_type, stats=CharacterStats(stamina))
        for index, (name, rider_type) in enumerate(_ROSTER_ENTRIES, start=1)
    ]


DEFAULT_ROSTER: list[Character] = build_roster()


def build_catalog(characters: Iterable[Character]) -> dict[int, Character]:
    return {character.id: character for character in characters}


def lookup_character(catalog: dict[int, Character], character_id: int) -> Character:
    if character_id not in catalog:
        raise UnknownCharacterError(f"No character with id {character_id}.")
    return catalog[character_id]


def default_track(name: str = "隨機賽道", length: int = 30) -> Track:
    """Placeholder track until real tracks are generated."""
    return Track(name=name, length=length)
