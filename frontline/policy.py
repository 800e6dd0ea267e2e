"""
Decision policies for automated sides.

A policy is a pure function of the side and the board: it holds no memory
between calls, so the same hand and board always yield the same action.
"""
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional, Union

from pydantic import BaseModel

from .board import Board
from .models import Card, Position, SideState

if TYPE_CHECKING:
    from .services.placement import PlacementValidator


class PlayCard(BaseModel):
    card_id: str
    position: Position


class EndTurn(BaseModel):
    pass


PolicyAction = Union[PlayCard, EndTurn]


class Policy(ABC):

    @abstractmethod
    def choose_action(self, side: SideState, board: Board, validator: Optional["PlacementValidator"] = None) -> PolicyAction:
        pass


class GreedyPolicy(Policy):
    """
    Plays the best strength-per-cost card it can afford into the lane where
    the enemy is weakest, just behind its own front line.
    """

    def __init__(self, lane_reach: int = 1):
        self.lane_reach = lane_reach

    def card_priority(self, hand: List[Card]) -> List[Card]:
        return sorted(hand, key=lambda c: (-c.strength_per_cost, -c.strength, c.id))

    def enemy_presence(self, side: SideState, board: Board, lane: int) -> float:
        lanes = board.lanes_within(lane, self.lane_reach)
        total = 0.0
        for unit in board.units_in_lanes(lanes, side.side_id.enemy):
            tile = board.tile_at(unit.position.lane, unit.position.depth)
            total += unit.strength * (tile.weight if tile else 1.0)
        return total

    def lane_order(self, side: SideState, board: Board) -> List[int]:
        centre = (board.lane_count - 1) / 2
        return sorted(
            range(board.lane_count),
            key=lambda lane: (self.enemy_presence(side, board, lane), abs(lane - centre), lane),
        )

    def choose_action(self, side: SideState, board: Board, validator: Optional["PlacementValidator"] = None) -> PolicyAction:
        reserved, in_flight = 0, set()
        if validator:
            reserved = validator.reserved_mana(side.side_id)
            in_flight = {p.card.id for p in validator.pending_for(side.side_id)}
        affordable = [
            c for c in self.card_priority(side.hand)
            if c.id not in in_flight and c.cost <= side.mana - reserved
        ]
        if not affordable:
            return EndTurn()

        for lane in self.lane_order(side, board):
            for position in board.zone_positions(side.side_id, lane):
                free = validator.is_tile_free(position) if validator else board.unit_at(position) is None
                if free:
                    return PlayCard(card_id=affordable[0].id, position=position)
        return EndTurn()
