"""
Board geometry and the owned board state (tiles, units, front lines).

Depth 0 is the player's baseline row and `depth_count - 1` the opponent's.
Player territory lies strictly behind the player front line (`depth < line`),
opponent territory strictly behind the opponent front line (`depth > line`).
"""
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Tuple

from .data_loader import MapTable
from .models import FrontLine, Position, SideId, Tile, Unit


class BoardGeometry(ABC):
    """Surface the core consumes from whatever hosts the board."""

    @abstractmethod
    def tile_at(self, lane: int, depth: int) -> Optional[Tile]:
        pass

    @abstractmethod
    def front_line_position(self, side: SideId) -> int:
        pass

    @abstractmethod
    def is_within_bounds(self, position: Position) -> bool:
        pass


class Board(BoardGeometry):
    def __init__(self, map_table: MapTable, terrain_weights: Optional[Dict[str, float]] = None, tile_size: float = 1.0):
        self.map_name = map_table.name
        self.lane_count = map_table.lane_count
        self.colors = list(map_table.colors)
        self.depth_count = map_table.depth_count
        if self.lane_count < 1 or self.depth_count < 3:
            raise ValueError("A board needs at least one lane and three rows")
        weights = terrain_weights or {}

        self.tiles: Dict[Tuple[int, int], Tile] = {}
        for depth, row in enumerate(map_table.rows):
            for lane, terrain in enumerate(row):
                self.tiles[(lane, depth)] = Tile(
                    lane=lane,
                    depth=depth,
                    terrain=terrain,
                    weight=float(weights.get(terrain, 1.0)),
                    x=(lane - (self.lane_count - 1) / 2) * tile_size,
                    z=(depth - (self.depth_count - 1) / 2) * tile_size,
                )

        midline = self.depth_count // 2
        self.front_lines: Dict[SideId, FrontLine] = {
            side: FrontLine(side=side, depth=midline) for side in SideId
        }
        self.units: Dict[str, Unit] = {}

    # --- Geometry ---

    def tile_at(self, lane: int, depth: int) -> Optional[Tile]:
        return self.tiles.get((lane, depth))

    def is_within_bounds(self, position: Position) -> bool:
        return 0 <= position.lane < self.lane_count and 0 <= position.depth < self.depth_count

    def baseline(self, side: SideId) -> int:
        return 0 if side == SideId.PLAYER else self.depth_count - 1

    def lanes_within(self, lane: int, reach: int) -> range:
        return range(max(0, lane - reach), min(self.lane_count, lane + reach + 1))

    # --- Front lines ---

    def front_line_position(self, side: SideId) -> int:
        return self.front_lines[side].depth

    def front_line_bounds(self, side: SideId) -> Tuple[int, int]:
        """Keeps the own baseline row legal and never passes the enemy baseline."""
        if side == SideId.PLAYER:
            return 1, self.depth_count - 1
        return 0, self.depth_count - 2

    def set_front_line(self, side: SideId, depth: int) -> int:
        low, high = self.front_line_bounds(side)
        self.front_lines[side].depth = max(low, min(high, depth))
        return self.front_lines[side].depth

    def in_territory(self, side: SideId, depth: int) -> bool:
        line = self.front_line_position(side)
        return depth < line if side == SideId.PLAYER else depth > line

    def is_in_zone(self, side: SideId, position: Position) -> bool:
        """Inside the side's own territory and outside the enemy's."""
        if not self.is_within_bounds(position):
            return False
        return self.in_territory(side, position.depth) and not self.in_territory(side.enemy, position.depth)

    def zone_positions(self, side: SideId, lane: int) -> List[Position]:
        """Legal tiles of a lane, nearest to the front line first."""
        depths = range(self.depth_count)
        ordered = reversed(depths) if side == SideId.PLAYER else depths
        return [Position(lane=lane, depth=d) for d in ordered if self.is_in_zone(side, Position(lane=lane, depth=d))]

    # --- Units ---

    def add_unit(self, unit: Unit):
        if self.unit_at(unit.position, unit.side):
            raise ValueError(f"Tile {unit.position.key()} already holds a {unit.side.value} unit")
        self.units[unit.id] = unit

    def remove_unit(self, unit_id: str) -> Optional[Unit]:
        unit = self.units.pop(unit_id, None)
        if unit:
            unit.alive = False
        return unit

    def living_units(self, side: Optional[SideId] = None) -> List[Unit]:
        return [u for u in self.units.values() if u.alive and (side is None or u.side == side)]

    def units_in_lanes(self, lanes: Iterable[int], side: Optional[SideId] = None) -> List[Unit]:
        lane_set = set(lanes)
        return [u for u in self.living_units(side) if u.position.lane in lane_set]

    def unit_at(self, position: Position, side: Optional[SideId] = None) -> Optional[Unit]:
        for unit in self.living_units(side):
            if unit.position == position:
                return unit
        return None

    def snapshot(self) -> List[Unit]:
        """Detached copies of the living units, in a stable order."""
        return [u.model_copy(deep=True) for u in sorted(self.living_units(), key=lambda u: u.id)]
