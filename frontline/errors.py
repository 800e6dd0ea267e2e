"""
Error kinds shared by every service of a match.
"""
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    OUT_OF_ZONE = "OutOfZone"
    TILE_OCCUPIED = "TileOccupied"
    INSUFFICIENT_RESOURCES = "InsufficientResources"
    NOT_YOUR_TURN = "NotYourTurn"
    HAND_FULL = "HandFull"
    INVALID_CARD = "InvalidCard"


class MatchError(ValueError):
    """Raised when a side attempts an illegal action."""

    kind: ErrorKind = ErrorKind.INVALID_CARD

    def __init__(self, message: str, kind: Optional[ErrorKind] = None):
        super().__init__(message)
        if kind is not None:
            self.kind = kind


class InsufficientResourcesError(MatchError):
    kind = ErrorKind.INSUFFICIENT_RESOURCES


class NotYourTurnError(MatchError):
    kind = ErrorKind.NOT_YOUR_TURN


class InvalidCardError(MatchError):
    kind = ErrorKind.INVALID_CARD


class PlacementError(MatchError):
    """A placement that failed one of the board checks (zone or occupancy)."""
