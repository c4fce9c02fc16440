"""
Shared fixtures for the navigation test suite.

Positions are built by moving due north/south of a base point, so the
great-circle distance between two test points equals the offset in metres.
"""

import logging

import pytest

from wayfinder.navigation.models import Coord, Instruction, ManeuverKind, Modifier
from wayfinder.navigation.nav_config import NavConfig

logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

METRES_PER_DEGREE_LAT = 111_194.93

BASE = Coord(-1.2647, 36.8027)   # Sarit Centre, Westlands


def north_of(origin: Coord, metres: float) -> Coord:
    return Coord(origin.lat + metres / METRES_PER_DEGREE_LAT, origin.lng)


class RecordingSpeech:
    """speak()/stop() sink that remembers every call."""

    def __init__(self):
        self.spoken = []        # (text, priority)
        self.stops = 0

    def speak(self, text, priority=False):
        self.spoken.append((text, priority))

    def stop(self):
        self.stops += 1


@pytest.fixture
def config(tmp_path):
    return NavConfig(log_dir=str(tmp_path / "logs"), search_debounce_s=0.02)


@pytest.fixture
def speech():
    return RecordingSpeech()


@pytest.fixture
def base():
    return BASE


@pytest.fixture
def north():
    return north_of


@pytest.fixture
def make_instruction():
    def _make(index, kind=ManeuverKind.TURN, location=BASE, modifier=Modifier.LEFT,
              text=None, road_name=None):
        return Instruction(
            id=f"step-{index}",
            kind=kind,
            modifier=modifier,
            text=text or f"in 200 meters, turn {modifier.value if modifier else 'ahead'}",
            location=location,
            distance_meters=200.0,
            duration_seconds=30.0,
            road_name=road_name,
        )
    return _make


@pytest.fixture
def three_steps(make_instruction):
    """turn at BASE, turn 2 km north, arrive 4 km north."""
    return [
        make_instruction(0, ManeuverKind.TURN, BASE, Modifier.RIGHT, "in 300 meters, turn right onto Waiyaki Way"),
        make_instruction(1, ManeuverKind.TURN, north_of(BASE, 2000), Modifier.LEFT, "in 2.0 kilometers, turn left"),
        make_instruction(2, ManeuverKind.ARRIVE, north_of(BASE, 4000), None, "You have arrived at your destination"),
    ]
