"""
Pydantic models for the match state.

Cards are immutable once created. Units, sides and the turn state are mutated
only through the services in `frontline.services`.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict, Tuple
from enum import Enum
import uuid

from .errors import ErrorKind


# --- Enums ---

class SideId(str, Enum):
    PLAYER = "Player"
    OPPONENT = "Opponent"

    @property
    def enemy(self) -> "SideId":
        return SideId.OPPONENT if self == SideId.PLAYER else SideId.PLAYER

    @property
    def forward(self) -> int:
        """Depth direction this side's units advance in."""
        return 1 if self == SideId.PLAYER else -1

class TurnPhase(str, Enum):
    AWAITING_ACTION = "AWAITING_ACTION"
    RESOLVING = "RESOLVING"
    ENDED = "ENDED"


# --- Board primitives ---

class Position(BaseModel):
    lane: int
    depth: int

    model_config = ConfigDict(frozen=True)

    def key(self) -> Tuple[int, int]:
        return (self.lane, self.depth)

class Tile(BaseModel):
    lane: int
    depth: int
    terrain: str
    weight: float = 1.0
    # Absolute scene coordinates of the tile centre
    x: float = 0.0
    z: float = 0.0


# --- Card Models ---

class UnitArchetype(BaseModel):
    name: str
    strength: int
    advance_rate: int = 1

    model_config = ConfigDict(frozen=True)

class Card(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    cost: int
    archetype: UnitArchetype

    model_config = ConfigDict(frozen=True)

    @property
    def name(self) -> str:
        return self.archetype.name

    @property
    def strength(self) -> int:
        return self.archetype.strength

    @property
    def strength_per_cost(self) -> float:
        if self.cost <= 0:
            return float(self.strength)
        return self.strength / self.cost

class Unit(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    side: SideId
    name: str
    position: Position
    strength: int
    advance_rate: int = 1
    alive: bool = True
    card_id: Optional[str] = None

    @classmethod
    def from_card(cls, card: Card, side: SideId, position: Position) -> "Unit":
        return cls(
            side=side,
            name=card.name,
            position=position,
            strength=card.archetype.strength,
            advance_rate=card.archetype.advance_rate,
            card_id=card.id,
        )


# --- Side & Match State ---

class SideState(BaseModel):
    side_id: SideId
    name: str
    health: int = 10
    mana: int = 0
    automated: bool = False
    turns_taken: int = 0

    hand: List[Card] = Field(default_factory=list)
    draw_pile: List[Card] = Field(default_factory=list)
    discard_pile: List[Card] = Field(default_factory=list)

    def get_card_from_hand(self, card_id: str) -> Optional[Card]:
        for card in self.hand:
            if card.id == card_id:
                return card
        return None

    @property
    def is_defeated(self) -> bool:
        return self.health <= 0

class FrontLine(BaseModel):
    side: SideId
    depth: int

class TurnState(BaseModel):
    active_side: SideId = SideId.PLAYER
    turn_number: int = 1
    phase: TurnPhase = TurnPhase.AWAITING_ACTION
    losing_side: Optional[SideId] = None

class MatchState(BaseModel):
    match_id: str
    sides: Dict[SideId, SideState] = Field(default_factory=dict)
    turn: TurnState = Field(default_factory=TurnState)
    log: List[str] = Field(default_factory=list)
    verbose: bool = False

    def add_log(self, message: str):
        self.log.append(message)
        if self.verbose:
            print(f"[{self.match_id}] {message}")

    def side(self, side_id: SideId) -> SideState:
        return self.sides[side_id]


# --- Placement & Resolution results ---

class PendingPlacement(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    side: SideId
    card: Card
    position: Position

class PlacementResult(BaseModel):
    unit: Optional[Unit] = None
    error: Optional[ErrorKind] = None
    message: str = ""

    @property
    def accepted(self) -> bool:
        return self.unit is not None and self.error is None

class LaneReport(BaseModel):
    lane: int
    pressure: Dict[SideId, float] = Field(default_factory=dict)
    strength_before: int = 0
    attrition: int = 0
    damage_dealt: int = 0
    strength_after: int = 0
    push: int = 0  # front-line steps the lane winner pushes the loser back
    winner: Optional[SideId] = None

class ResolutionReport(BaseModel):
    acting_side: SideId
    lanes: List[LaneReport] = Field(default_factory=list)
    front_line_moves: Dict[SideId, int] = Field(default_factory=dict)
    damage: Dict[SideId, int] = Field(default_factory=dict)
    removed_unit_ids: List[str] = Field(default_factory=list)
    losing_side: Optional[SideId] = None
