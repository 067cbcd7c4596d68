"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field

# Type aliases to make SessionModel easier to read
CharacterId = int
RacerRecord = dict[str, int | float]


@dataclass
class SessionModel:
    """Transport-safe representation of a game session used between API, Service, DB, and Race layers."""

    screen: str
    player_name: str
    opponent_type: str
    character_pool: list[CharacterId]
    draft_picks: list[CharacterId] = field(default_factory=list)
    race_started: bool = False
    racers: list[RacerRecord] = field(default_factory=list)
    current_turn: int = 0
    turn_number: int = 1
    weather: str = "晴朗"
    game_log: list[str] = field(default_factory=list)
