import itertools
from types import SimpleNamespace

import pytest

from frontline.board import Board
from frontline.config import MatchSettings
from frontline.data_loader import MatchDataLoader
from frontline.events import EventRecorder
from frontline.models import Card, MatchState, Position, SideId, SideState, Unit, UnitArchetype
from frontline.services import CombatResolver, PlacementValidator, RosterManager, TurnCoordinator

_ids = itertools.count(1)


def make_card(cost: int, strength: int, advance_rate: int = 1, card_id: str = None) -> Card:
    return Card(
        id=card_id or f"card-{next(_ids)}",
        cost=cost,
        archetype=UnitArchetype(name=f"Unit{strength}", strength=strength, advance_rate=advance_rate),
    )


def make_unit(side: SideId, lane: int, depth: int, strength: int, advance_rate: int = 1, unit_id: str = None) -> Unit:
    return Unit(
        id=unit_id or f"unit-{next(_ids)}",
        side=side,
        name=f"Unit{strength}",
        position=Position(lane=lane, depth=depth),
        strength=strength,
        advance_rate=advance_rate,
    )


def build_match(settings: MatchSettings, map_name: str = "S", mana: int = 0, policies=None) -> SimpleNamespace:
    """Wires the services by hand around an empty board and two empty sides."""
    state = MatchState(match_id="test")
    for side in SideId:
        state.sides[side] = SideState(side_id=side, name=side.value, health=settings.STARTING_HEALTH, mana=mana)
    board = Board(MatchDataLoader().load_map(map_name), terrain_weights=settings.TERRAIN_WEIGHTS)
    recorder = EventRecorder()
    roster = RosterManager(state, settings)
    validator = PlacementValidator(state, board, roster, recorder)
    resolver = CombatResolver(state, board, settings)
    coordinator = TurnCoordinator(state, settings, roster, validator, resolver, policies=policies, observer=recorder)
    return SimpleNamespace(
        state=state,
        board=board,
        recorder=recorder,
        roster=roster,
        validator=validator,
        resolver=resolver,
        coordinator=coordinator,
        player=state.sides[SideId.PLAYER],
        opponent=state.sides[SideId.OPPONENT],
    )


@pytest.fixture
def settings():
    return MatchSettings(SEED=7, VERBOSE=False)


@pytest.fixture
def match(settings):
    return build_match(settings)
