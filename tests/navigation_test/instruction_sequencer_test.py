import math

import pytest

from wayfinder.navigation.instruction_sequencer import ARRIVAL_MESSAGE, InstructionSequencer
from wayfinder.navigation.models import GuidanceEventType, ManeuverKind


@pytest.fixture
def sequencer(speech, config):
    return InstructionSequencer(speech, config)


def _at(sequencer, coord):
    return sequencer.update_position(coord.lat, coord.lng)


def test_load_speaks_start_announcement(sequencer, speech, three_steps):
    event = sequencer.load_instructions(three_steps)

    assert event.type == GuidanceEventType.START
    assert speech.spoken == [("Starting navigation. in 300 meters, turn right onto Waiyaki Way", True)]
    assert sequencer.current_index == 0
    assert sequencer.current_instruction is three_steps[0]


def test_load_empty_sequence_is_silent(sequencer, speech, base):
    assert sequencer.load_instructions([]) is None
    assert speech.spoken == []
    assert sequencer.update_position(base.lat, base.lng) is None
    assert not sequencer.is_finished


def test_approach_announces_reminds_then_advances(sequencer, speech, three_steps, base, north):
    sequencer.load_instructions(three_steps)
    speech.spoken.clear()

    events = [_at(sequencer, north(base, -d)) for d in (300, 150, 40, 3)]

    assert events[0] is None
    assert events[1].type == GuidanceEventType.ANNOUNCE
    assert events[2].type == GuidanceEventType.REMINDER
    assert events[3].type == GuidanceEventType.ADVANCE
    assert all(e.index == 0 for e in events[1:])
    assert sequencer.current_index == 1
    assert speech.spoken == [
        ("in 300 meters, turn right onto Waiyaki Way", True),
        ("Now, turn right", False),
    ]


def test_no_reannouncement_inside_radius(sequencer, speech, three_steps, base, north):
    sequencer.load_instructions(three_steps)

    assert _at(sequencer, north(base, -180)).type == GuidanceEventType.ANNOUNCE
    assert _at(sequencer, north(base, -120)) is None
    assert _at(sequencer, north(base, -45)).type == GuidanceEventType.REMINDER
    assert _at(sequencer, north(base, -30)) is None
    assert sequencer.announced_ids == {"step-0"}
    assert sequencer.reminded_ids == {"step-0"}


def test_at_most_one_event_per_update(sequencer, make_instruction, base, north):
    # Two maneuvers 60 m apart: the earlier one always wins.
    sequencer.load_instructions([
        make_instruction(0, location=base),
        make_instruction(1, location=north(base, 60)),
    ])
    event = _at(sequencer, north(base, 30))

    assert event.type == GuidanceEventType.REMINDER
    assert event.index == 0
    assert "step-1" not in sequencer.reminded_ids


def test_progress_never_moves_backwards(sequencer, three_steps, base, north):
    sequencer.load_instructions(three_steps)
    _at(sequencer, base)
    assert sequencer.current_index == 1

    # GPS jitter back towards the committed step
    assert _at(sequencer, north(base, -40)) is None
    assert _at(sequencer, north(base, 5)) is None
    assert sequencer.current_index == 1


def test_index_is_monotonic_over_a_drive(sequencer, three_steps, base, north):
    sequencer.load_instructions(three_steps)
    seen = []
    for metres in range(-300, 4001, 5):
        _at(sequencer, north(base, metres))
        seen.append(sequencer.current_index)
    assert seen == sorted(seen)
    assert sequencer.is_finished


def test_arrival_is_terminal(sequencer, speech, three_steps):
    sequencer.load_instructions(three_steps)
    _at(sequencer, three_steps[0].location)
    _at(sequencer, three_steps[1].location)
    speech.spoken.clear()

    event = _at(sequencer, three_steps[2].location)

    assert event.type == GuidanceEventType.ARRIVED
    assert event.instruction.kind == ManeuverKind.ARRIVE
    assert speech.spoken == [(ARRIVAL_MESSAGE, True)]
    assert sequencer.current_index == 3
    assert sequencer.is_finished
    assert sequencer.current_instruction is None
    assert sequencer.remaining_steps == 0
    assert _at(sequencer, three_steps[2].location) is None


def test_missing_location_is_skipped_but_keeps_index(sequencer, make_instruction, base, north):
    sequencer.load_instructions([
        make_instruction(0, location=None),
        make_instruction(1, location=base),
    ])
    event = _at(sequencer, north(base, -100))

    assert event.type == GuidanceEventType.ANNOUNCE
    assert event.index == 1
    _at(sequencer, base)
    assert sequencer.current_index == 2


@pytest.mark.parametrize("lat, lng", [(None, 36.8), (-1.26, None), (math.nan, 36.8), ("-1.2647", "36.8027")])
def test_invalid_position_changes_nothing(sequencer, three_steps, lat, lng):
    sequencer.load_instructions(three_steps)
    assert sequencer.update_position(lat, lng) is None
    assert sequencer.current_index == 0
    assert sequencer.announced_ids == frozenset()


def test_reload_resets_progress(sequencer, three_steps, base, north):
    sequencer.load_instructions(three_steps)
    _at(sequencer, north(base, -150))
    _at(sequencer, base)

    sequencer.load_instructions(three_steps)

    assert sequencer.current_index == 0
    assert sequencer.announced_ids == frozenset()
    assert _at(sequencer, north(base, -150)).type == GuidanceEventType.ANNOUNCE


def test_upcoming_instructions_window(sequencer, make_instruction, base, north):
    steps = [make_instruction(i, location=north(base, i * 1000)) for i in range(5)]
    sequencer.load_instructions(steps)
    assert [i.id for i in sequencer.upcoming_instructions] == ["step-0", "step-1", "step-2"]

    _at(sequencer, base)
    assert [i.id for i in sequencer.upcoming_instructions] == ["step-1", "step-2", "step-3"]
    assert sequencer.remaining_steps == 4


def test_voice_disabled_still_tracks_progress(speech, config, three_steps, base, north):
    config.voice_enabled = False
    sequencer = InstructionSequencer(speech, config)
    sequencer.load_instructions(three_steps)

    assert _at(sequencer, north(base, -150)).type == GuidanceEventType.ANNOUNCE
    assert speech.spoken == []


def test_toggle_voice(sequencer, speech):
    assert sequencer.toggle_voice() is False
    assert speech.stops == 1
    sequencer.announce_custom("ignored while muted")
    assert speech.spoken == []

    assert sequencer.toggle_voice() is True
    assert speech.spoken == [("Voice navigation enabled", False)]


def test_announce_helpers_use_priorities(sequencer, speech, three_steps):
    sequencer.announce_instruction(three_steps[1])
    sequencer.announce_custom("Traffic ahead")
    assert speech.spoken == [(three_steps[1].text, True), ("Traffic ahead", False)]


def test_runs_without_speech_sink(config, three_steps, base):
    sequencer = InstructionSequencer(config=config)
    sequencer.load_instructions(three_steps)
    assert sequencer.update_position(base.lat, base.lng).type == GuidanceEventType.ADVANCE
    sequencer.stop_speaking()
