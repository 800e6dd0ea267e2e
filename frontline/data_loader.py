import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .models import UnitArchetype


@dataclass
class MapTable:
    name: str
    rows: List[List[str]] = field(default_factory=list)
    colors: List[str] = field(default_factory=list)

    @property
    def lane_count(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    @property
    def depth_count(self) -> int:
        return len(self.rows)


@dataclass
class CatalogEntry:
    id: str
    cost: int
    archetype: UnitArchetype
    copies: int = 1


class MatchDataLoader:
    """Loads static match data (map tables, unit catalog) from JSON files."""

    def __init__(
        self,
        data_root: Optional[Path] = None,
        maps_file: Optional[str] = None,
        units_file: Optional[str] = None,
    ):
        self.data_root = data_root or Path(__file__).resolve().parent / "data"
        self.maps_file = maps_file  # Optional full path or filename
        self.units_file = units_file  # Optional full path or filename

    def _load_json(self, filename: str, file_override: Optional[str] = None):
        path = Path(file_override) if file_override else self.data_root / filename
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)

    def map_names(self) -> List[str]:
        return sorted(self._load_json("maps.json", self.maps_file).get("maps", {}))

    def load_map(self, name: str) -> MapTable:
        maps: Dict[str, Any] = self._load_json("maps.json", self.maps_file).get("maps", {})
        raw = maps.get(name)
        if raw is None:
            raise KeyError(f"Unknown map: {name}")
        rows = [[str(cell).upper() for cell in row] for row in raw.get("rows", [])]
        if not rows or any(len(row) != len(rows[0]) for row in rows):
            raise ValueError(f"Map {name} must be a non-empty rectangular grid")
        return MapTable(name=name, rows=rows, colors=list(raw.get("colors", [])))

    def load_catalog(self) -> List[CatalogEntry]:
        payload = self._load_json("units.json", self.units_file)
        raw_items = payload.get("units", []) if isinstance(payload, dict) else payload
        entries: List[CatalogEntry] = []
        for raw in raw_items:
            archetype = UnitArchetype(
                name=raw.get("name") or raw["id"],
                strength=int(raw["strength"]),
                advance_rate=int(raw.get("advance_rate", 1)),
            )
            entries.append(
                CatalogEntry(
                    id=str(raw["id"]),
                    cost=int(raw.get("cost", 0)),
                    archetype=archetype,
                    copies=max(1, int(raw.get("copies", 1))),
                )
            )
        return entries
