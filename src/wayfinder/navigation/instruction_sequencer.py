# instruction_sequencer.py
# State machine that turns a position stream into voice-guidance events.
# Call load_instructions() once per route, then update_position() on every GPS fix.

import logging
from typing import FrozenSet, List, Optional, Set

from .geo_utils import haversine_distance, is_valid_position
from .maneuver_text import reminder_text
from .models import GuidanceEvent, GuidanceEventType, Instruction, ManeuverKind
from .nav_config import NavConfig

logger = logging.getLogger(__name__)

ARRIVAL_MESSAGE = "You have arrived at your destination. Navigation ended."
VOICE_ENABLED_MESSAGE = "Voice navigation enabled"


class InstructionSequencer:
    """
    Schedules announce / reminder / advance / arrived events for one route.

    At most one event is produced per position update: instructions are
    scanned from the current index and the first one inside any radius
    decides the outcome. Committed steps are never looked at again.

    Usage:
        sequencer = InstructionSequencer(speech, config)
        sequencer.load_instructions(parse_steps(osrm_steps))

        # Inside GPS loop:
        event = sequencer.update_position(lat, lng)

    Args:
        speech: Object with speak(text, priority) and stop(); None for silent mode.
        config: NavConfig instance.
    """

    def __init__(self, speech=None, config: Optional[NavConfig] = None) -> None:
        self.config = config or NavConfig()
        self._speech = speech
        self._voice_enabled: bool = self.config.voice_enabled
        self._instructions: List[Instruction] = []
        self._current_index: int = 0
        self._announced: Set[str] = set()
        self._reminded: Set[str] = set()

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def load_instructions(self, instructions: List[Instruction]) -> Optional[GuidanceEvent]:
        """
        Replace the active sequence and reset all progress.

        Returns:
            A START event when the sequence is non-empty, else None.
        """
        self._instructions = list(instructions)
        self._current_index = 0
        self._announced.clear()
        self._reminded.clear()

        if not self._instructions:
            logger.info("Loaded empty instruction sequence.")
            return None

        first = self._instructions[0]
        text = f"{self.config.start_preamble} {first.text}"
        logger.info(f"Loaded {len(self._instructions)} instructions. First: {first.text}")
        self._speak(text, priority=True)
        return GuidanceEvent(GuidanceEventType.START, 0, first, text)

    # ------------------------------------------------------------------
    # Read-only properties
    # ------------------------------------------------------------------

    @property
    def instructions(self) -> List[Instruction]:
        return list(self._instructions)

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_instruction(self) -> Optional[Instruction]:
        if 0 <= self._current_index < len(self._instructions):
            return self._instructions[self._current_index]
        return None

    @property
    def upcoming_instructions(self) -> List[Instruction]:
        start = self._current_index
        return self._instructions[start:start + self.config.upcoming_count]

    @property
    def remaining_steps(self) -> int:
        return max(0, len(self._instructions) - self._current_index)

    @property
    def is_finished(self) -> bool:
        return bool(self._instructions) and self._current_index >= len(self._instructions)

    @property
    def announced_ids(self) -> FrozenSet[str]:
        return frozenset(self._announced)

    @property
    def reminded_ids(self) -> FrozenSet[str]:
        return frozenset(self._reminded)

    # ------------------------------------------------------------------
    # Core method — call on every GPS update
    # ------------------------------------------------------------------

    def update_position(self, lat: float, lng: float) -> Optional[GuidanceEvent]:
        """
        Compare the current position with the pending instructions.

        Args:
            lat, lng: Current position in decimal degrees.

        Returns:
            The single GuidanceEvent triggered by this update, or None.
        """
        if not self._instructions:
            return None
        if not is_valid_position(lat, lng):
            logger.debug(f"Rejected invalid position ({lat}, {lng}).")
            return None

        cfg = self.config
        for index in range(self._current_index, len(self._instructions)):
            instruction = self._instructions[index]
            if instruction.location is None:
                continue

            dist = haversine_distance(lat, lng, instruction.location.lat, instruction.location.lng)

            # 1. Maneuver point passed
            if dist < cfg.passed_radius_m:
                return self._pass(index, instruction, dist)

            # 2. Reminder band
            if cfg.passed_radius_m < dist <= cfg.reminder_radius_m:
                return self._remind(index, instruction, dist)

            # 3. Announcement band
            if cfg.reminder_radius_m < dist <= cfg.announce_radius_m:
                return self._announce(index, instruction, dist)

        return None

    def _announce(self, index: int, instruction: Instruction, dist: float) -> Optional[GuidanceEvent]:
        if instruction.id in self._announced:
            return None
        self._announced.add(instruction.id)
        logger.info(f"Announce {instruction.id} at {int(dist)} m: {instruction.text}")
        self._speak(instruction.text, priority=True)
        return GuidanceEvent(GuidanceEventType.ANNOUNCE, index, instruction, instruction.text, dist)

    def _remind(self, index: int, instruction: Instruction, dist: float) -> Optional[GuidanceEvent]:
        if instruction.id in self._reminded:
            return None
        self._reminded.add(instruction.id)
        text = reminder_text(instruction)
        logger.info(f"Reminder {instruction.id} at {int(dist)} m: {text}")
        self._speak(text, priority=False)
        return GuidanceEvent(GuidanceEventType.REMINDER, index, instruction, text, dist)

    def _pass(self, index: int, instruction: Instruction, dist: float) -> GuidanceEvent:
        self._current_index = index + 1

        if instruction.kind == ManeuverKind.ARRIVE:
            logger.info(f"Arrived at {instruction.id}.")
            self._speak(ARRIVAL_MESSAGE, priority=True)
            return GuidanceEvent(GuidanceEventType.ARRIVED, index, instruction, ARRIVAL_MESSAGE, dist)

        logger.info(f"Passed {instruction.id}; now at index {self._current_index}.")
        return GuidanceEvent(GuidanceEventType.ADVANCE, index, instruction, None, dist)

    # ------------------------------------------------------------------
    # Voice control
    # ------------------------------------------------------------------

    @property
    def voice_enabled(self) -> bool:
        return self._voice_enabled

    def set_voice_enabled(self, enabled: bool) -> None:
        if enabled == self._voice_enabled:
            return
        self._voice_enabled = enabled
        if enabled:
            self._speak(VOICE_ENABLED_MESSAGE, priority=False)
        else:
            self.stop_speaking()

    def toggle_voice(self) -> bool:
        """Flip voice output; returns the new state."""
        self.set_voice_enabled(not self._voice_enabled)
        return self._voice_enabled

    def announce_instruction(self, instruction: Instruction) -> None:
        self._speak(instruction.text, priority=True)

    def announce_custom(self, text: str) -> None:
        self._speak(text, priority=False)

    def stop_speaking(self) -> None:
        if self._speech is not None:
            self._speech.stop()

    def _speak(self, text: str, priority: bool) -> None:
        if self._voice_enabled and self._speech is not None:
            self._speech.speak(text, priority)
