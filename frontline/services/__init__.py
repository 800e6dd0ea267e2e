"""
Match services: each one owns a single concern and is composed by
`frontline.match.MatchInstance`.
"""

from .roster import RosterManager
from .placement import PlacementValidator
from .resolver import CombatResolver
from .turns import TurnCoordinator

__all__ = [
    "RosterManager",
    "PlacementValidator",
    "CombatResolver",
    "TurnCoordinator",
]
