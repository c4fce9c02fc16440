# route_parser.py
# Adapter from routing-backend (OSRM) steps to Instruction records.
# Text is generated here once and never changes afterwards.

import logging
from typing import Any, Dict, List, Optional

from .maneuver_text import maneuver_text
from .models import Coord, Instruction, ManeuverKind, Modifier

logger = logging.getLogger(__name__)


# OSRM maneuver types that are not one of our eight kinds
_OSRM_KIND_ALIASES: Dict[str, ManeuverKind] = {
    "new name":        ManeuverKind.CONTINUE,
    "notification":    ManeuverKind.CONTINUE,
    "end of road":     ManeuverKind.TURN,
    "on ramp":         ManeuverKind.MERGE,
    "off ramp":        ManeuverKind.EXIT,
    "exit roundabout": ManeuverKind.EXIT,
    "exit rotary":     ManeuverKind.EXIT,
    "rotary":          ManeuverKind.ROUNDABOUT,
    "roundabout turn": ManeuverKind.ROUNDABOUT,
}


def parse_kind(value: Optional[str]) -> Optional[ManeuverKind]:
    """Map an OSRM maneuver type to a ManeuverKind, None if missing or unknown."""
    if not value:
        return None
    value = value.strip().lower()
    try:
        return ManeuverKind(value)
    except ValueError:
        return _OSRM_KIND_ALIASES.get(value)


def _parse_location(maneuver: Dict[str, Any]) -> Optional[Coord]:
    """OSRM locations are [lng, lat]."""
    location = maneuver.get("location")
    try:
        lng, lat = location
        return Coord(float(lat), float(lng))
    except (TypeError, ValueError):
        return None


def parse_steps(steps: List[Dict[str, Any]]) -> List[Instruction]:
    """
    Convert raw OSRM route steps into an ordered instruction list.

    Malformed steps (no maneuver, kind or location) are kept so that indices
    stay aligned with the backend's step list.

    Args:
        steps: OSRM `legs[*].steps` entries.

    Returns:
        List of Instruction objects, ids "step-<index>".
    """
    instructions: List[Instruction] = []
    for index, step in enumerate(steps):
        maneuver = step.get("maneuver") or {}
        kind = parse_kind(maneuver.get("type"))
        modifier = Modifier.parse(maneuver.get("modifier"))
        road_name = step.get("name") or step.get("ref") or None
        distance = float(step.get("distance") or 0.0)
        duration = float(step.get("duration") or 0.0)
        location = _parse_location(maneuver)

        if kind is None or location is None:
            logger.warning(f"Step {index} is malformed (kind={maneuver.get('type')!r}, location={location}).")

        instructions.append(Instruction(
            id=f"step-{index}",
            kind=kind,
            modifier=modifier,
            text=maneuver_text(kind, modifier, road_name, distance),
            distance_meters=distance,
            duration_seconds=duration,
            road_name=road_name,
            location=location,
        ))
    return instructions
