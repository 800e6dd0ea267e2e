"""
Decides whether a unit placement is legal and performs it.

Placement is a two-phase commit: `begin_placement` validates and locks the
target tile, `commit_placement` pays for the card and creates the unit,
`rollback_placement` releases the lock without touching any state. A locked
tile counts as occupied, so at most one placement per tile can be pending.
"""
import asyncio
from typing import Awaitable, Callable, Dict, List, Optional, Tuple, Union

from ..board import Board
from ..errors import ErrorKind, InvalidCardError, InsufficientResourcesError, MatchError, PlacementError
from ..events import MatchObserver
from ..models import MatchState, PendingPlacement, PlacementResult, Position, SideId, Unit
from .roster import RosterManager

ConfirmCallback = Callable[[PendingPlacement], Awaitable[bool]]
CommitGuard = Callable[[PendingPlacement], None]


class PlacementValidator:

    def __init__(self, state: MatchState, board: Board, roster: RosterManager, observer: Optional[MatchObserver] = None):
        self.state = state
        self.board = board
        self.roster = roster
        self.observer = observer or MatchObserver()
        self.locks: Dict[Tuple[int, int], PendingPlacement] = {}
        self.pending: Dict[str, PendingPlacement] = {}

    # --- Read-only checks ---

    def is_in_zone(self, side: SideId, position: Position) -> bool:
        return self.board.is_in_zone(side, position)

    def is_tile_free(self, position: Position) -> bool:
        return position.key() not in self.locks and self.board.unit_at(position) is None

    def reserved_mana(self, side: SideId) -> int:
        return sum(p.card.cost for p in self.pending.values() if p.side == side)

    def pending_for(self, side: SideId) -> List[PendingPlacement]:
        return [p for p in self.pending.values() if p.side == side]

    # --- Two-phase placement ---

    def begin_placement(self, side: SideId, card_id: str, position: Position) -> PendingPlacement:
        if not self.is_in_zone(side, position):
            raise PlacementError(
                f"Tile {position.key()} is outside {side.value}'s zone "
                f"(front line at {self.board.front_line_position(side)}).",
                ErrorKind.OUT_OF_ZONE,
            )
        if not self.is_tile_free(position):
            raise PlacementError(f"Tile {position.key()} is occupied.", ErrorKind.TILE_OCCUPIED)

        card = self.roster.find_card(side, card_id)
        if any(p.card.id == card.id for p in self.pending.values()):
            raise InvalidCardError(f"Card {card.name} is already being placed.")
        if not self.roster.can_afford(side, card, reserved=self.reserved_mana(side)):
            raise InsufficientResourcesError(f"Not enough mana to place {card.name} (cost {card.cost}).")

        pending = PendingPlacement(side=side, card=card, position=position)
        self.locks[position.key()] = pending
        self.pending[pending.id] = pending
        return pending

    def _release(self, pending: PendingPlacement) -> bool:
        if self.pending.pop(pending.id, None) is None:
            return False
        self.locks.pop(pending.position.key(), None)
        return True

    def commit_placement(self, pending: PendingPlacement) -> Unit:
        if not self._release(pending):
            raise MatchError(f"Placement {pending.id} is not pending.", ErrorKind.INVALID_CARD)
        card = self.roster.spend(pending.side, pending.card.id)
        unit = Unit.from_card(card, pending.side, pending.position)
        self.board.add_unit(unit)
        self.state.add_log(
            f"{self.state.side(pending.side).name} places {unit.name} (str {unit.strength}) at {pending.position.key()}."
        )
        self.observer.on_placement_accepted(unit)
        return unit

    def rollback_placement(self, pending: PendingPlacement) -> bool:
        return self._release(pending)

    def rollback_all(self, side: Optional[SideId] = None) -> int:
        dropped = [p for p in list(self.pending.values()) if side is None or p.side == side]
        for pending in dropped:
            self._release(pending)
        return len(dropped)

    # --- One-shot helpers ---

    def _reject(self, side: SideId, error: MatchError) -> PlacementResult:
        self.state.add_log(f"Placement rejected for {self.state.side(side).name}: {error}")
        self.observer.on_placement_rejected(error.kind)
        return PlacementResult(error=error.kind, message=str(error))

    def try_place(self, side: SideId, card_id: str, position: Position) -> PlacementResult:
        """Validate and commit in one step. Failures leave the match untouched."""
        try:
            pending = self.begin_placement(side, card_id, position)
            unit = self.commit_placement(pending)
        except MatchError as e:
            return self._reject(side, e)
        return PlacementResult(unit=unit)

    async def place_with_confirmation(
        self,
        side: SideId,
        card_id: str,
        position: Union[Position, Tuple[int, int]],
        confirm: ConfirmCallback,
        guard: Optional[CommitGuard] = None,
    ) -> PlacementResult:
        """
        Locks the tile, awaits an external confirmation, then commits or rolls back.
        Cancelling the awaiting task rolls the placement back before re-raising.
        `guard` runs after the confirmation and may raise a MatchError to refuse
        the commit, e.g. when the turn has moved on while waiting.
        """
        if isinstance(position, tuple):
            position = Position(lane=position[0], depth=position[1])
        try:
            pending = self.begin_placement(side, card_id, position)
        except MatchError as e:
            return self._reject(side, e)

        try:
            confirmed = await confirm(pending)
        except (asyncio.CancelledError, Exception):
            self.rollback_placement(pending)
            raise

        if not confirmed:
            self.rollback_placement(pending)
            return PlacementResult(message="Placement cancelled.")
        try:
            if guard:
                guard(pending)
            unit = self.commit_placement(pending)
        except MatchError as e:
            self.rollback_placement(pending)
            return self._reject(side, e)
        return PlacementResult(unit=unit)
