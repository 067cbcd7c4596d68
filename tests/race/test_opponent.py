"""Unit tests for /src/race/opponent.py"""

import random

import pytest

from src.core.shared_types import ActionType
from src.race.opponent import RandomOpponent
from src.race.race import MOVE_SPACES, Racer
from src.race.roster import DEFAULT_ROSTER, Ability, Character

SEEDS = range(30)


def make_team(*characters: Character) -> list[Racer]:
    return [Racer.fresh(c, 1, position) for position, c in enumerate(characters)]


def test_choose_character_from_available() -> None:
    opponent = RandomOpponent(random.Random(3))
    available = [2, 5, 9]
    for _ in range(20):
        assert opponent.choose_character(1, available) in available


def test_choose_character_without_options() -> None:
    assert RandomOpponent(random.Random(0)).choose_character(1, []) is None


def test_choose_action_for_empty_team() -> None:
    assert RandomOpponent(random.Random(0)).choose_action([]) is None


@pytest.mark.parametrize("seed", SEEDS)
def test_choose_action_params_fit_the_action(seed: int) -> None:
    team = make_team(*DEFAULT_ROSTER[:3])
    racer, action, params = RandomOpponent(random.Random(seed)).choose_action(team)

    assert racer in team
    assert params.character_id == racer.character.id
    # nobody in the default roster has an ability
    assert action != ActionType.ABILITY
    if action == ActionType.MOVE:
        assert params.spaces in MOVE_SPACES
    if action == ActionType.SWAP:
        assert params.target_character_id in {r.character.id for r in team}
        assert params.target_character_id != racer.character.id


@pytest.mark.parametrize("seed", SEEDS)
def test_lone_rider_falls_back_to_move(seed: int) -> None:
    team = make_team(DEFAULT_ROSTER[0])
    _, action, params = RandomOpponent(random.Random(seed)).choose_action(team)

    assert action in (ActionType.MOVE, ActionType.REST)
    if action == ActionType.MOVE:
        assert params.spaces in MOVE_SPACES


@pytest.mark.parametrize("seed", SEEDS)
def test_ability_index_within_range(seed: int) -> None:
    rider = Character(id=20, name="技能車手", type="衝刺手", abilities=(Ability("衝刺"),))
    _, action, params = RandomOpponent(random.Random(seed)).choose_action(make_team(rider))
    if action == ActionType.ABILITY:
        assert params.ability_index == 0
