"""
Sequences the turns of a match.

The coordinator is the only component that changes `TurnState`. Its phases
run AWAITING_ACTION -> RESOLVING -> AWAITING_ACTION (next side) until a side
drops to zero health and the match moves to ENDED.
"""
from typing import Dict, Optional, Tuple, Union

from ..config import MatchSettings
from ..errors import ErrorKind, NotYourTurnError
from ..events import MatchObserver
from ..models import (
    MatchState, PendingPlacement, PlacementResult, Position, ResolutionReport, SideId, TurnPhase, TurnState, Unit
)
from ..policy import EndTurn, Policy
from .placement import ConfirmCallback, PlacementValidator
from .resolver import CombatResolver
from .roster import RosterManager

PositionLike = Union[Position, Tuple[int, int]]


def _as_position(position: PositionLike) -> Position:
    if isinstance(position, Position):
        return position
    lane, depth = position
    return Position(lane=lane, depth=depth)


class TurnCoordinator:

    def __init__(
        self,
        state: MatchState,
        settings: MatchSettings,
        roster: RosterManager,
        validator: PlacementValidator,
        resolver: CombatResolver,
        policies: Optional[Dict[SideId, Policy]] = None,
        observer: Optional[MatchObserver] = None,
    ):
        self.state = state
        self.settings = settings
        self.roster = roster
        self.validator = validator
        self.resolver = resolver
        self.policies: Dict[SideId, Policy] = dict(policies or {})
        self.observer = observer or MatchObserver()
        self.last_report: Optional[ResolutionReport] = None

    @property
    def turn(self) -> TurnState:
        return self.state.turn

    @property
    def is_over(self) -> bool:
        return self.turn.phase == TurnPhase.ENDED

    def is_automated(self, side: SideId) -> bool:
        return side in self.policies

    def is_turn_of(self, side: SideId) -> bool:
        return self.turn.phase == TurnPhase.AWAITING_ACTION and self.turn.active_side == side

    def _require_turn(self, side: SideId):
        if not self.is_turn_of(side):
            raise NotYourTurnError(
                f"It is not {side.value}'s turn (active: {self.turn.active_side.value}, phase: {self.turn.phase.value})."
            )

    def _require_placement_turn(self, side: SideId):
        try:
            self._require_turn(side)
        except NotYourTurnError:
            self.observer.on_placement_rejected(ErrorKind.NOT_YOUR_TURN)
            raise

    # --- Lifecycle ---

    def start(self, first_side: SideId = SideId.PLAYER):
        for side in SideId:
            self.roster.draw_opening_hand(side)
        self.state.turn = TurnState(active_side=first_side, turn_number=1, phase=TurnPhase.AWAITING_ACTION)
        self.state.add_log("--- MATCH START ---")
        self._begin_turn()
        self._run_automated()

    def _begin_turn(self):
        side = self.turn.active_side
        side_state = self.state.side(side)
        mana = self.roster.refill_turn_resources(side)
        self.roster.draw_card(side)
        self.state.add_log(f"--- TURN {self.turn.turn_number}: {side_state.name} ({mana} mana, {len(side_state.hand)} cards) ---")
        self.observer.on_turn_changed(side, self.turn.turn_number)

    def _run_automated(self):
        while not self.is_over and self.is_automated(self.turn.active_side):
            self._play_automated_turn(self.turn.active_side)

    def _play_automated_turn(self, side: SideId):
        policy = self.policies[side]
        side_state = self.state.side(side)
        # Each accepted play removes a card from the hand, so this bounds the loop.
        for _ in range(len(side_state.hand) + 1):
            action = policy.choose_action(side_state, self.validator.board, self.validator)
            if isinstance(action, EndTurn):
                break
            result = self.validator.try_place(side, action.card_id, action.position)
            if not result.accepted:
                break
        self._resolve_and_advance(side)

    def _resolve_and_advance(self, side: SideId) -> ResolutionReport:
        self.validator.rollback_all(side)
        self.turn.phase = TurnPhase.RESOLVING
        report = self.resolver.resolve(side)
        self.last_report = report
        for moved_side, depth in report.front_line_moves.items():
            self.observer.on_front_line_moved(moved_side, depth)

        if report.losing_side is not None:
            self._end_match(report.losing_side)
        elif self.turn.turn_number >= self.settings.TURN_LIMIT:
            self._end_match(self._loser_by_health())
        else:
            self.turn.turn_number += 1
            self.turn.active_side = side.enemy
            self.turn.phase = TurnPhase.AWAITING_ACTION
            self._begin_turn()
        return report

    def _loser_by_health(self) -> Optional[SideId]:
        player = self.state.side(SideId.PLAYER).health
        opponent = self.state.side(SideId.OPPONENT).health
        if player == opponent:
            return None
        return SideId.PLAYER if player < opponent else SideId.OPPONENT

    def _end_match(self, losing_side: Optional[SideId]):
        self.turn.phase = TurnPhase.ENDED
        self.turn.losing_side = losing_side
        if losing_side is None:
            self.state.add_log("--- MATCH OVER: draw ---")
        else:
            self.state.add_log(f"--- MATCH OVER: {self.state.side(losing_side).name} loses ---")
        self.observer.on_match_ended(losing_side)

    # --- Side actions ---

    def play_card(self, side: SideId, card_id: str, position: PositionLike) -> PlacementResult:
        if not self.is_turn_of(side):
            self.observer.on_placement_rejected(ErrorKind.NOT_YOUR_TURN)
            return PlacementResult(error=ErrorKind.NOT_YOUR_TURN, message=f"It is not {side.value}'s turn.")
        return self.validator.try_place(side, card_id, _as_position(position))

    def begin_placement(self, side: SideId, card_id: str, position: PositionLike) -> PendingPlacement:
        self._require_placement_turn(side)
        return self.validator.begin_placement(side, card_id, _as_position(position))

    def commit_placement(self, pending: PendingPlacement) -> Unit:
        self._require_placement_turn(pending.side)
        return self.validator.commit_placement(pending)

    def rollback_placement(self, pending: PendingPlacement) -> bool:
        return self.validator.rollback_placement(pending)

    async def place_with_confirmation(
        self, side: SideId, card_id: str, position: PositionLike, confirm: ConfirmCallback
    ) -> PlacementResult:
        if not self.is_turn_of(side):
            self.observer.on_placement_rejected(ErrorKind.NOT_YOUR_TURN)
            return PlacementResult(error=ErrorKind.NOT_YOUR_TURN, message=f"It is not {side.value}'s turn.")
        return await self.validator.place_with_confirmation(
            side, card_id, _as_position(position), confirm, guard=lambda pending: self._require_turn(pending.side)
        )

    def end_turn(self, side: SideId) -> ResolutionReport:
        self._require_turn(side)
        report = self._resolve_and_advance(side)
        self._run_automated()
        return report
