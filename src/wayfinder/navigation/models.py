# models.py
# Shared data structures and enums used across all modules.

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


# ---------------------------------------------------------------------------
# Coordinate
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Coord:
    """Immutable geographic coordinate."""
    lat: float
    lng: float

    def to_dict(self) -> dict:
        return {"lat": self.lat, "lng": self.lng}

    @staticmethod
    def from_dict(d: Optional[dict]) -> Optional["Coord"]:
        if not d:
            return None
        return Coord(float(d["lat"]), float(d["lng"]))


# ---------------------------------------------------------------------------
# Route instructions
# ---------------------------------------------------------------------------

class ManeuverKind(Enum):
    TURN       = "turn"
    CONTINUE   = "continue"
    ARRIVE     = "arrive"
    DEPART     = "depart"
    ROUNDABOUT = "roundabout"
    MERGE      = "merge"
    FORK       = "fork"
    EXIT       = "exit"


class Modifier(Enum):
    LEFT         = "left"
    RIGHT        = "right"
    STRAIGHT     = "straight"
    SLIGHT_LEFT  = "slight left"
    SLIGHT_RIGHT = "slight right"
    SHARP_LEFT   = "sharp left"
    SHARP_RIGHT  = "sharp right"
    UTURN        = "uturn"

    @staticmethod
    def parse(value: Optional[str]) -> Optional["Modifier"]:
        """Accepts both "slight left" and "slight-left"; unknown values map to None."""
        if not value:
            return None
        try:
            return Modifier(value.strip().lower().replace("-", " "))
        except ValueError:
            return None


@dataclass(frozen=True)
class Instruction:
    """A single maneuver step of a computed route. Text is fixed at ingestion."""
    id: str
    kind: Optional[ManeuverKind]
    text: str
    location: Optional[Coord]
    distance_meters: float = 0.0        # length of the step, not distance to it
    duration_seconds: float = 0.0
    modifier: Optional[Modifier] = None
    road_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kind": self.kind.value if self.kind else None,
            "modifier": self.modifier.value if self.modifier else None,
            "text": self.text,
            "location": self.location.to_dict() if self.location else None,
            "distance_meters": self.distance_meters,
            "duration_seconds": self.duration_seconds,
            "road_name": self.road_name,
        }

    @staticmethod
    def from_dict(d: dict) -> "Instruction":
        kind = d.get("kind")
        return Instruction(
            id=d["id"],
            kind=ManeuverKind(kind) if kind else None,
            text=d["text"],
            location=Coord.from_dict(d.get("location")),
            distance_meters=d.get("distance_meters", 0.0),
            duration_seconds=d.get("duration_seconds", 0.0),
            modifier=Modifier.parse(d.get("modifier")),
            road_name=d.get("road_name"),
        )


# ---------------------------------------------------------------------------
# Guidance events
# ---------------------------------------------------------------------------

class GuidanceEventType(Enum):
    START     = "start"
    ANNOUNCE  = "announce"
    REMINDER  = "reminder"
    ADVANCE   = "advance"
    ARRIVED   = "arrived"


@dataclass
class GuidanceEvent:
    """Returned by InstructionSequencer whenever a position update triggers something."""
    type: GuidanceEventType
    index: int
    instruction: Optional[Instruction] = None
    text: Optional[str] = None                 # spoken text, if any
    distance_m: Optional[float] = None         # metres to the instruction's point


# ---------------------------------------------------------------------------
# Road hazards and speed cameras
# ---------------------------------------------------------------------------

class RoadConditionType(Enum):
    MURRAM       = "murram"
    CONSTRUCTION = "construction"
    POTHOLE      = "pothole"
    FLOODED      = "flooded"


class Severity(Enum):
    LOW    = "low"
    MEDIUM = "medium"
    HIGH   = "high"


class CameraType(Enum):
    FIXED   = "fixed"
    MOBILE  = "mobile"
    AVERAGE = "average"


class AlertTrack(Enum):
    HAZARD = "hazard"
    CAMERA = "camera"


@dataclass(frozen=True)
class RoadCondition:
    """A static, named road hazard."""
    id: str
    type: RoadConditionType
    location: Coord
    name: str
    description: str
    severity: Severity
    verified: bool = True
    reported_at: Optional[datetime] = None


@dataclass(frozen=True)
class SpeedCamera:
    """A static enforcement point."""
    id: str
    location: Coord
    name: str
    speed_limit_kph: int
    type: CameraType = CameraType.FIXED
    direction: Optional[str] = None
    active: bool = True


@dataclass
class ProximityResult:
    """Returned by ProximityAlertEngine.check_proximity() every position update."""
    hazard_alert: Optional[RoadCondition] = None
    camera_alert: Optional[SpeedCamera] = None
    hazard_changed: bool = False               # a new hazard became the active alert
    camera_changed: bool = False


# ---------------------------------------------------------------------------
# Geocoding
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GeocodingResult:
    """A place-search candidate."""
    place_id: str
    display_name: str
    short_name: str
    location: Coord
    type: str
    importance: float
    address: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class SearchState:
    """Read-only snapshot of a GeocodingSearchController."""
    results: List[GeocodingResult] = field(default_factory=list)
    is_loading: bool = False
    last_error: Optional[str] = None
