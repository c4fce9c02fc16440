# maneuver_text.py
# Converts a maneuver (kind, modifier, road, distance) into spoken text.
# Rules are evaluated top-to-bottom; the first rule whose kind matches wins.

import re
from typing import Callable, Dict, List, Optional, Tuple

from .geo_utils import round_half_up
from .models import Instruction, ManeuverKind, Modifier


# ---------------------------------------------------------------------------
# Landmark hints for well-known Nairobi roads
# ---------------------------------------------------------------------------

NAIROBI_LANDMARKS: Dict[str, List[str]] = {
    "Ring Road Parklands": ["Next to Sarit Centre", "Near Westgate Mall"],
    "Uhuru Highway":       ["Towards Nyayo Stadium", "Past Railway Station"],
    "Mombasa Road":        ["JKIA direction", "Near SGR terminus"],
    "Waiyaki Way":         ["ABC Place side", "Near Westlands roundabout"],
    "Kenyatta Avenue":     ["City centre", "Near KICC"],
    "Ngong Road":          ["Towards Prestige Plaza", "Junction Mall area"],
    "Thika Road":          ["Garden City direction", "Safari Park area"],
    "Langata Road":        ["Wilson Airport side", "Near Carnivore"],
}


def distance_phrase(distance: float) -> str:
    """"in 40 meters", "in 300 meters", "in 1.2 kilometers"."""
    if distance < 100:
        return f"in {round_half_up(distance)} meters"
    if distance < 1000:
        return f"in {round_half_up(distance / 100) * 100} meters"
    return f"in {distance / 1000:.1f} kilometers"


def _mod(modifier: Optional[Modifier], fallback: str) -> str:
    return modifier.value if modifier else fallback


def _arrive_text(modifier: Optional[Modifier]) -> str:
    if modifier == Modifier.LEFT:
        return "Your destination is on your left"
    if modifier == Modifier.RIGHT:
        return "Your destination is on your right"
    return "You have arrived at your destination"


# (kind, template) — template(dist, modifier, road, hint)
_Template = Callable[[str, Optional[Modifier], str, str], str]

MANEUVER_RULES: List[Tuple[Optional[ManeuverKind], _Template]] = [
    (ManeuverKind.TURN,
     lambda d, m, road, hint: f"{d}, turn {_mod(m, 'ahead')}{road}{hint}"),
    (ManeuverKind.CONTINUE,
     lambda d, m, road, hint: f"Continue straight{road} for {d[len('in '):]}"),
    (ManeuverKind.ARRIVE,
     lambda d, m, road, hint: _arrive_text(m)),
    (ManeuverKind.DEPART,
     lambda d, m, road, hint: f"Head {_mod(m, 'straight')}{road}"),
    (ManeuverKind.ROUNDABOUT,
     lambda d, m, road, hint: f"{d}, enter the roundabout and take the {_mod(m, 'exit')}{road}"),
    (ManeuverKind.MERGE,
     lambda d, m, road, hint: f"{d}, merge {_mod(m, 'ahead')}{road}"),
    (ManeuverKind.FORK,
     lambda d, m, road, hint: f"{d}, take the {_mod(m, 'fork')}{road}"),
    (ManeuverKind.EXIT,
     lambda d, m, road, hint: f"{d}, take the exit{road}"),
    # Catch-all for steps whose kind is missing
    (None,
     lambda d, m, road, hint: f"{d}, continue {_mod(m, 'ahead')}{road}"),
]


def maneuver_text(
    kind: Optional[ManeuverKind],
    modifier: Optional[Modifier],
    road_name: Optional[str],
    distance: float,
) -> str:
    """
    Human-readable instruction for one maneuver.

    Args:
        kind:      Maneuver kind, or None for malformed steps.
        modifier:  Optional direction modifier.
        road_name: Road the step leads onto.
        distance:  Step length in metres.

    Returns:
        Instruction text.
    """
    dist = distance_phrase(distance)
    road = f" onto {road_name}" if road_name else ""
    landmarks = NAIROBI_LANDMARKS.get(road_name or "")
    hint = f", {landmarks[0]}" if landmarks else ""

    for rule_kind, template in MANEUVER_RULES:
        if rule_kind is None or rule_kind == kind:
            return template(dist, modifier, road, hint)
    raise AssertionError("unreachable: catch-all rule missing")


_CLAUSE_SPLIT = re.compile(r"[,;]")


def reminder_text(instruction: Instruction) -> str:
    """Short form spoken at reminder distance."""
    if instruction.kind in (ManeuverKind.TURN, ManeuverKind.ROUNDABOUT):
        return f"Now, turn {_mod(instruction.modifier, 'ahead')}"
    if instruction.kind == ManeuverKind.ARRIVE:
        return "Arriving at your destination"
    first_clause = _CLAUSE_SPLIT.split(instruction.text, maxsplit=1)[0].strip()
    return f"{first_clause} now"
