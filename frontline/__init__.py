"""
Core engine for a lane-based, turn-structured combat match.

This package knows nothing about rendering or input. A host builds a
`MatchInstance`, feeds it player placements, and renders whatever the
`MatchObserver` callbacks report.
"""

from .board import Board, BoardGeometry
from .config import MatchSettings
from .data_loader import CatalogEntry, MapTable, MatchDataLoader
from .errors import (
    ErrorKind,
    InsufficientResourcesError,
    InvalidCardError,
    MatchError,
    NotYourTurnError,
    PlacementError,
)
from .events import EventRecorder, EventType, MatchEvent, MatchObserver
from .match import MatchInstance, MatchSetupService
from .models import (
    Card,
    FrontLine,
    MatchState,
    PendingPlacement,
    PlacementResult,
    Position,
    ResolutionReport,
    SideId,
    SideState,
    Tile,
    TurnPhase,
    TurnState,
    Unit,
    UnitArchetype,
)
from .policy import EndTurn, GreedyPolicy, PlayCard, Policy

__all__ = [
    "Board",
    "BoardGeometry",
    "MatchSettings",
    "CatalogEntry",
    "MapTable",
    "MatchDataLoader",
    "ErrorKind",
    "InsufficientResourcesError",
    "InvalidCardError",
    "MatchError",
    "NotYourTurnError",
    "PlacementError",
    "EventRecorder",
    "EventType",
    "MatchEvent",
    "MatchObserver",
    "MatchInstance",
    "MatchSetupService",
    "Card",
    "FrontLine",
    "MatchState",
    "PendingPlacement",
    "PlacementResult",
    "Position",
    "ResolutionReport",
    "SideId",
    "SideState",
    "Tile",
    "TurnPhase",
    "TurnState",
    "Unit",
    "UnitArchetype",
    "EndTurn",
    "GreedyPolicy",
    "PlayCard",
    "Policy",
]
