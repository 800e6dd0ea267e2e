"""
Visual feedback boundary.

The core never holds rendering objects. Hosts subclass `MatchObserver` and
override the callbacks they care about; the default implementations do nothing.
"""
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .errors import ErrorKind
from .models import SideId, Unit


class MatchObserver:
    def on_placement_accepted(self, unit: Unit):
        pass

    def on_placement_rejected(self, reason: ErrorKind):
        pass

    def on_front_line_moved(self, side: SideId, new_depth: int):
        pass

    def on_turn_changed(self, side: SideId, turn_number: int):
        pass

    def on_match_ended(self, losing_side: Optional[SideId]):
        pass


class EventType(str, Enum):
    PLACEMENT_ACCEPTED = "placement_accepted"
    PLACEMENT_REJECTED = "placement_rejected"
    FRONT_LINE_MOVED = "front_line_moved"
    TURN_CHANGED = "turn_changed"
    MATCH_ENDED = "match_ended"


class MatchEvent(BaseModel):
    type: EventType
    payload: Dict[str, Any] = Field(default_factory=dict)


class EventRecorder(MatchObserver):
    """Keeps every event in order. Handy for replays and tests."""

    def __init__(self):
        self.events: List[MatchEvent] = []

    def of_type(self, event_type: EventType) -> List[MatchEvent]:
        return [e for e in self.events if e.type == event_type]

    def on_placement_accepted(self, unit: Unit):
        self.events.append(MatchEvent(type=EventType.PLACEMENT_ACCEPTED, payload={"unit": unit.model_dump()}))

    def on_placement_rejected(self, reason: ErrorKind):
        self.events.append(MatchEvent(type=EventType.PLACEMENT_REJECTED, payload={"reason": reason}))

    def on_front_line_moved(self, side: SideId, new_depth: int):
        self.events.append(MatchEvent(type=EventType.FRONT_LINE_MOVED, payload={"side": side, "depth": new_depth}))

    def on_turn_changed(self, side: SideId, turn_number: int):
        self.events.append(MatchEvent(type=EventType.TURN_CHANGED, payload={"side": side, "turn_number": turn_number}))

    def on_match_ended(self, losing_side: Optional[SideId]):
        self.events.append(MatchEvent(type=EventType.MATCH_ENDED, payload={"losing_side": losing_side}))


class ObserverGroup(MatchObserver):
    """Fans every callback out to a list of observers."""

    def __init__(self, observers: Optional[List[MatchObserver]] = None):
        self.observers: List[MatchObserver] = list(observers or [])

    def add(self, observer: MatchObserver):
        self.observers.append(observer)

    def on_placement_accepted(self, unit: Unit):
        for observer in self.observers:
            observer.on_placement_accepted(unit)

    def on_placement_rejected(self, reason: ErrorKind):
        for observer in self.observers:
            observer.on_placement_rejected(reason)

    def on_front_line_moved(self, side: SideId, new_depth: int):
        for observer in self.observers:
            observer.on_front_line_moved(side, new_depth)

    def on_turn_changed(self, side: SideId, turn_number: int):
        for observer in self.observers:
            observer.on_turn_changed(side, turn_number)

    def on_match_ended(self, losing_side: Optional[SideId]):
        for observer in self.observers:
            observer.on_match_ended(losing_side)
