import importlib
import json

import pytest

from wayfinder.navigation.models import (
    Coord, GuidanceEventType, RoadCondition, RoadConditionType, Severity,
)
from wayfinder.navigation.nav_logger import NavLogger
from wayfinder.navigation.navigator import NavigationSession
from wayfinder.navigation.playback import simulate_route
from wayfinder.navigation.main import DEMO_STEPS
from wayfinder.navigation.route_parser import parse_steps


@pytest.fixture
def hazard(base, north):
    return RoadCondition("pothole-x", RoadConditionType.POTHOLE, north(base, 1000), "Pothole X",
                         "Deep pothole", Severity.HIGH)


@pytest.fixture
def session(config, speech, hazard):
    return NavigationSession(config, speech=speech, hazards=[hazard], cameras=[])


def _events(config):
    with open(config.event_filepath, encoding="utf-8") as f:
        return [json.loads(line) for line in f]


def test_start_saves_route_and_announces(session, config, speech, three_steps):
    success, msg = session.start_navigation(three_steps)

    assert success
    assert msg == "Route ready. 3 steps."
    assert session.is_active
    assert speech.spoken[0][0].startswith("Starting navigation.")
    assert NavLogger(config).load_route() == three_steps


def test_start_without_instructions_fails(session):
    success, _ = session.start_navigation([])
    assert not success
    assert not session.is_active


def test_update_combines_guidance_and_alerts(session, config, three_steps, base, north):
    session.start_navigation(three_steps)

    first = session.update(*_latlng(north(base, -150)))
    assert first.guidance.type == GuidanceEventType.ANNOUNCE
    assert first.hazard_alert is None

    near_hazard = session.update(*_latlng(north(base, 700)))
    assert near_hazard.guidance is None
    assert near_hazard.hazard_alert.id == "pothole-x"
    assert near_hazard.new_hazard_alert

    kinds = [e["event"] for e in _events(config)]
    assert kinds == ["announce", "hazard_alert"]


def test_drive_to_arrival_ends_session(session, three_steps, base, north):
    session.start_navigation(three_steps)
    polyline = [base, north(base, 2000), north(base, 4000)]

    arrived = None
    for position in simulate_route(polyline, step_m=8.0):
        update = session.update(position.lat, position.lng)
        if update.guidance and update.guidance.type == GuidanceEventType.ARRIVED:
            arrived = update
            break

    assert arrived is not None
    assert not session.is_active
    assert session.remaining_steps == 0


def test_stop_resets_dismissals(session, three_steps, base, north):
    session.start_navigation(three_steps)
    session.update(*_latlng(north(base, 700)))
    assert session.dismiss_hazard_alert() == "pothole-x"
    assert session.update(*_latlng(north(base, 700))).hazard_alert is None

    session.stop_navigation()
    assert not session.is_active
    assert session.update(*_latlng(north(base, 700))).hazard_alert.id == "pothole-x"


def test_alerts_work_without_active_route(session, base, north):
    update = session.update(*_latlng(north(base, 900)))
    assert update.guidance is None
    assert update.hazard_alert.id == "pothole-x"


def test_report_condition_is_logged(session, config, base):
    condition = session.report_condition("construction", base, "New works", "Lane closed", "low")

    assert condition in session.alerts.hazards
    last = _events(config)[-1]
    assert last["event"] == "report"
    assert last["id"] == condition.id
    assert last["type"] == "construction"


def test_start_from_osrm_steps(session):
    success, _ = session.start_from_osrm(DEMO_STEPS)
    assert success
    assert len(session.upcoming_instructions) == 3
    assert session.current_instruction.id == "step-0"


def test_load_route_missing_file_returns_none(config):
    assert NavLogger(config).load_route(config.route_filepath + ".missing") is None


def test_simulate_route_spacing(base, north):
    end = north(base, 100)
    points = list(simulate_route([base, end], step_m=30.0))

    assert len(points) == 5
    assert points[0] == base
    assert points[-1].lat == pytest.approx(end.lat)
    assert points[2].lat - points[1].lat == pytest.approx((end.lat - base.lat) / 4)


def test_simulate_route_edge_cases(base):
    assert list(simulate_route([], step_m=10.0)) == []
    with pytest.raises(ValueError):
        list(simulate_route([base], step_m=0))


def test_demo_route_parses():
    instructions = parse_steps(DEMO_STEPS)
    assert instructions[1].text.endswith("Next to Sarit Centre")
    assert all(i.location is not None for i in instructions)


def _latlng(coord: Coord):
    return coord.lat, coord.lng


def test_importing_demo_leaves_logging_alone(monkeypatch):
    import logging

    import wayfinder.navigation.main as demo

    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
    importlib.reload(demo)

    assert calls == []
    assert len(demo.DEMO_STEPS) == 5
