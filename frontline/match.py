"""
Composes the match services into a single, playable match.

`MatchSetupService` builds the initial state (sides, decks, board) and
`MatchInstance` wires the services in dependency order and exposes the
external-facing methods a host calls.
"""
import random
import uuid
from typing import Any, Dict, List, Optional, Tuple

from .board import Board
from .config import MatchSettings, settings as default_settings
from .data_loader import MatchDataLoader
from .deck_factory import create_deck
from .events import MatchObserver, ObserverGroup
from .models import MatchState, PendingPlacement, PlacementResult, SideId, SideState, TurnPhase
from .policy import GreedyPolicy, Policy
from .services import CombatResolver, PlacementValidator, RosterManager, TurnCoordinator
from .services.placement import ConfirmCallback
from .services.turns import PositionLike


class MatchSetupService:
    """A factory for a fully initialized MatchState and Board."""

    @staticmethod
    def create_match(
        match_id: str,
        settings: MatchSettings,
        data_loader: MatchDataLoader,
        rng: random.Random,
        automated: Tuple[SideId, ...] = (SideId.OPPONENT,),
    ) -> Tuple[MatchState, Board]:
        state = MatchState(match_id=match_id, verbose=settings.VERBOSE)

        # 1. Board
        board = Board(data_loader.load_map(settings.MAP_NAME), terrain_weights=settings.TERRAIN_WEIGHTS)

        # 2. Sides and decks
        catalog = data_loader.load_catalog()
        names = {SideId.PLAYER: settings.PLAYER_NAME, SideId.OPPONENT: settings.OPPONENT_NAME}
        for side in SideId:
            state.sides[side] = SideState(
                side_id=side,
                name=names[side],
                health=settings.STARTING_HEALTH,
                mana=settings.STARTING_MANA,
                automated=side in automated,
                draw_pile=create_deck(catalog, side.value.lower(), settings.DECK_SIZE, rng),
            )

        state.add_log(f"Match created on map {board.map_name} ({board.lane_count}x{board.depth_count}).")
        return state, board


class MatchInstance:
    """
    Owns the state of a single match and composes the services that act on it.
    """

    def __init__(
        self,
        match_id: Optional[str] = None,
        settings: Optional[MatchSettings] = None,
        data_loader: Optional[MatchDataLoader] = None,
        observers: Optional[List[MatchObserver]] = None,
        policies: Optional[Dict[SideId, Policy]] = None,
    ):
        self.settings = settings or default_settings
        self.rng = random.Random(self.settings.SEED)
        if policies is None:
            policies = {SideId.OPPONENT: GreedyPolicy(lane_reach=self.settings.LANE_REACH)}

        # 1. Base state
        self.state, self.board = MatchSetupService.create_match(
            match_id or str(uuid.uuid4()),
            self.settings,
            data_loader or MatchDataLoader(),
            self.rng,
            automated=tuple(policies),
        )
        self.observer = ObserverGroup(observers)

        # 2. Services in dependency order
        self.roster = RosterManager(self.state, self.settings)
        self.validator = PlacementValidator(self.state, self.board, self.roster, self.observer)
        self.resolver = CombatResolver(self.state, self.board, self.settings)
        self.coordinator = TurnCoordinator(
            self.state,
            self.settings,
            self.roster,
            self.validator,
            self.resolver,
            policies=policies,
            observer=self.observer,
        )

    # --- Host-facing API ---

    def add_observer(self, observer: MatchObserver):
        self.observer.add(observer)

    def start(self, first_side: SideId = SideId.PLAYER):
        self.coordinator.start(first_side)

    def play_card(self, side: SideId, card_id: str, position: PositionLike) -> PlacementResult:
        return self.coordinator.play_card(side, card_id, position)

    def begin_placement(self, side: SideId, card_id: str, position: PositionLike) -> PendingPlacement:
        return self.coordinator.begin_placement(side, card_id, position)

    def commit_placement(self, pending: PendingPlacement):
        return self.coordinator.commit_placement(pending)

    def rollback_placement(self, pending: PendingPlacement) -> bool:
        return self.coordinator.rollback_placement(pending)

    async def place_with_confirmation(
        self, side: SideId, card_id: str, position: PositionLike, confirm: ConfirmCallback
    ) -> PlacementResult:
        return await self.coordinator.place_with_confirmation(side, card_id, position, confirm)

    def end_turn(self, side: SideId = SideId.PLAYER):
        return self.coordinator.end_turn(side)

    @property
    def is_over(self) -> bool:
        return self.state.turn.phase == TurnPhase.ENDED

    @property
    def losing_side(self) -> Optional[SideId]:
        return self.state.turn.losing_side

    def get_public_state(self, viewer: SideId = SideId.PLAYER) -> Dict[str, Any]:
        """
        A view of the match for one side. The other side's hand and draw pile
        are reduced to counts.
        """
        sides = {}
        for side_id, side in self.state.sides.items():
            if side_id == viewer:
                sides[side_id.value] = side.model_dump(exclude={"draw_pile"})
                sides[side_id.value]["draw_pile"] = len(side.draw_pile)
            else:
                sides[side_id.value] = {
                    "side_id": side_id.value,
                    "name": side.name,
                    "health": side.health,
                    "mana": side.mana,
                    "hand": len(side.hand),
                    "draw_pile": len(side.draw_pile),
                    "automated": side.automated,
                }
        return {
            "match_id": self.state.match_id,
            "map": self.board.map_name,
            "map_colors": self.board.colors,
            "turn": self.state.turn.model_dump(),
            "sides": sides,
            "front_lines": {side.value: self.board.front_line_position(side) for side in SideId},
            "units": [u.model_dump() for u in self.board.living_units()],
            "log": self.state.log[-50:],
        }
