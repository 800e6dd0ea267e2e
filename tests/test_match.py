import random

import pytest

from frontline.config import MatchSettings
from frontline.data_loader import MatchDataLoader
from frontline.deck_factory import create_deck
from frontline.events import EventRecorder, EventType
from frontline.match import MatchInstance
from frontline.models import SideId, TurnPhase
from frontline.policy import GreedyPolicy


def test_data_loader_reads_bundled_maps():
    loader = MatchDataLoader()
    assert loader.map_names() == ["L", "S"]

    small = loader.load_map("S")
    assert (small.lane_count, small.depth_count) == (5, 5)
    assert small.rows[0] == ["D", "L", "D", "L", "D"]
    assert loader.load_map("L").depth_count == 7

    with pytest.raises(KeyError):
        loader.load_map("XL")


def test_deck_factory_is_seeded_and_sized():
    catalog = MatchDataLoader().load_catalog()
    assert {entry.id for entry in catalog} >= {"scout", "knight"}

    first = create_deck(catalog, "player", 20, random.Random(5))
    second = create_deck(catalog, "player", 20, random.Random(5))
    assert len(first) == 20
    assert [c.id for c in first] == [c.id for c in second]
    assert len({c.id for c in first}) == 20

    padded = create_deck(catalog[:1], "p", 12, random.Random(1))
    assert len(padded) == 12
    assert len({c.id for c in padded}) == 12


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("FRONTLINE_MAP_NAME", "L")
    monkeypatch.setenv("FRONTLINE_STARTING_HEALTH", "15")
    settings = MatchSettings()
    assert settings.MAP_NAME == "L"

    match = MatchInstance(settings=settings)
    assert match.board.lane_count == 7
    assert match.state.side(SideId.PLAYER).health == 15


def test_player_turn_against_greedy_opponent():
    recorder = EventRecorder()
    match = MatchInstance(match_id="m1", settings=MatchSettings(SEED=11, STARTING_MANA=5), observers=[recorder])
    match.start()

    player = match.state.side(SideId.PLAYER)
    assert player.mana == 7
    card = min(player.hand, key=lambda c: c.cost)
    result = match.play_card(SideId.PLAYER, card.id, (2, 1))
    assert result.accepted
    assert player.mana == 7 - card.cost

    match.end_turn()

    assert match.state.turn.active_side == SideId.PLAYER
    assert match.state.turn.turn_number == 3
    assert match.board.living_units(SideId.OPPONENT)
    assert [e.payload["turn_number"] for e in recorder.of_type(EventType.TURN_CHANGED)] == [1, 2, 3]


def test_public_state_hides_opponent_hand():
    match = MatchInstance(settings=MatchSettings(SEED=2))
    match.start()

    view = match.get_public_state(SideId.PLAYER)

    assert isinstance(view["sides"]["Player"]["hand"], list)
    assert view["sides"]["Opponent"]["hand"] == len(match.state.side(SideId.OPPONENT).hand)
    assert view["front_lines"] == {"Player": 2, "Opponent": 2}
    assert view["turn"]["phase"] == TurnPhase.AWAITING_ACTION
    assert view["map_colors"] == ["#7DC383", "#446E5C"]
    assert view["sides"]["Opponent"]["automated"] is True
    assert view["sides"]["Player"]["automated"] is False


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_automated_match_runs_to_completion(seed):
    settings = MatchSettings(SEED=seed, TURN_LIMIT=150)
    recorder = EventRecorder()
    match = MatchInstance(
        settings=settings,
        observers=[recorder],
        policies={SideId.PLAYER: GreedyPolicy(), SideId.OPPONENT: GreedyPolicy()},
    )
    match.start()

    assert match.is_over
    assert match.state.turn.turn_number <= settings.TURN_LIMIT
    ended = recorder.of_type(EventType.MATCH_ENDED)
    assert len(ended) == 1
    loser = match.losing_side
    if loser is not None and match.state.turn.turn_number < settings.TURN_LIMIT:
        assert match.state.side(loser).health == 0
    for side in SideId:
        low, high = match.board.front_line_bounds(side)
        assert low <= match.board.front_line_position(side) <= high
