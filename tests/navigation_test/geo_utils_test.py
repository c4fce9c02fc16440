import math

import pytest

from wayfinder.navigation.geo_utils import haversine_distance, is_valid_position, round_half_up
from wayfinder.navigation.nav_config import NavConfig


def test_haversine_zero_for_same_point():
    assert haversine_distance(-1.2647, 36.8027, -1.2647, 36.8027) == 0.0


def test_haversine_one_degree_of_latitude():
    assert haversine_distance(0.0, 36.8, 1.0, 36.8) == pytest.approx(111_194.93, rel=1e-6)


def test_haversine_is_symmetric():
    a = haversine_distance(-1.2647, 36.8027, -1.2864, 36.8172)
    b = haversine_distance(-1.2864, 36.8172, -1.2647, 36.8027)
    assert a == pytest.approx(b)
    assert 2800 < a < 3000      # Sarit Centre → KICC


@pytest.mark.parametrize("lat, lng, expected", [
    (-1.28, 36.82, True),
    (90.0, 180.0, True),
    (None, 36.82, False),
    (-1.28, None, False),
    (math.nan, 36.82, False),
    (91.0, 36.82, False),
    (-1.28, 181.0, False),
    ("abc", 36.82, False),
    ("-1.28", "36.82", False),
    (True, 36.82, False),
    (-1, 36, True),
])
def test_is_valid_position(lat, lng, expected):
    assert is_valid_position(lat, lng) is expected


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(42.4) == 42


def test_config_rejects_inconsistent_radii():
    with pytest.raises(ValueError):
        NavConfig(reminder_radius_m=250.0)
    with pytest.raises(ValueError):
        NavConfig(hazard_alert_radius_m=0)


def test_config_paths(tmp_path):
    config = NavConfig(log_dir=str(tmp_path))
    assert config.route_filepath == str(tmp_path / "active_route.json")
    assert config.event_filepath == str(tmp_path / "nav_session.jsonl")
