from frontline.models import Position, SideId
from frontline.policy import EndTurn, GreedyPolicy, PlayCard

from conftest import make_card, make_unit


def test_prefers_best_strength_per_cost(match):
    solid, efficient, big = make_card(2, 3), make_card(1, 2), make_card(5, 8)
    match.opponent.hand = [solid, efficient, big]
    match.opponent.mana = 10

    action = GreedyPolicy().choose_action(match.opponent, match.board, match.validator)

    assert isinstance(action, PlayCard)
    assert action.card_id == efficient.id


def test_skips_unaffordable_cards(match):
    strong, weak = make_card(2, 6), make_card(1, 1)
    match.opponent.hand = [strong, weak]
    match.opponent.mana = 1

    action = GreedyPolicy().choose_action(match.opponent, match.board, match.validator)

    assert action.card_id == weak.id


def test_ends_turn_without_mana(match):
    match.opponent.hand = [make_card(3, 5)]
    match.opponent.mana = 2
    assert isinstance(GreedyPolicy().choose_action(match.opponent, match.board), EndTurn)


def test_targets_lane_with_weakest_enemy_presence(match):
    match.opponent.hand = [make_card(1, 1)]
    match.opponent.mana = 1
    match.board.add_unit(make_unit(SideId.PLAYER, 1, 1, strength=5))
    match.board.add_unit(make_unit(SideId.PLAYER, 4, 0, strength=3))

    action = GreedyPolicy().choose_action(match.opponent, match.board, match.validator)

    assert action.position == Position(lane=3, depth=3)


def test_places_just_behind_own_front_line(match):
    match.opponent.hand = [make_card(1, 1)]
    match.opponent.mana = 1
    policy = GreedyPolicy()

    assert policy.choose_action(match.opponent, match.board).position == Position(lane=2, depth=3)

    match.board.add_unit(make_unit(SideId.OPPONENT, 2, 3, strength=1))
    assert policy.choose_action(match.opponent, match.board).position == Position(lane=2, depth=4)


def test_works_for_the_player_side_too(match):
    match.player.hand = [make_card(1, 1)]
    match.player.mana = 1
    action = GreedyPolicy().choose_action(match.player, match.board)
    assert action.position == Position(lane=2, depth=1)


def test_respects_pending_locks_and_reserved_mana(match):
    first, second = make_card(1, 2), make_card(1, 2)
    match.opponent.hand = [first, second]
    match.opponent.mana = 2
    match.validator.begin_placement(SideId.OPPONENT, first.id, Position(lane=2, depth=3))

    action = GreedyPolicy().choose_action(match.opponent, match.board, match.validator)
    assert action.position == Position(lane=2, depth=4)

    match.opponent.mana = 1
    assert isinstance(GreedyPolicy().choose_action(match.opponent, match.board, match.validator), EndTurn)


def test_ends_turn_when_zone_is_full(match):
    match.opponent.hand = [make_card(1, 1)]
    match.opponent.mana = 5
    for lane in range(match.board.lane_count):
        for depth in (3, 4):
            match.board.add_unit(make_unit(SideId.OPPONENT, lane, depth, strength=1))
    assert isinstance(GreedyPolicy().choose_action(match.opponent, match.board), EndTurn)


def test_is_deterministic(match):
    match.opponent.hand = [make_card(2, 3), make_card(1, 2), make_card(2, 4)]
    match.opponent.mana = 4
    match.board.add_unit(make_unit(SideId.PLAYER, 0, 1, strength=2))
    match.board.add_unit(make_unit(SideId.PLAYER, 3, 0, strength=4))
    policy = GreedyPolicy()

    actions = [policy.choose_action(match.opponent, match.board, match.validator) for _ in range(5)]
    assert all(a == actions[0] for a in actions)
    assert GreedyPolicy().choose_action(match.opponent, match.board, match.validator) == actions[0]
