# navigator.py
# Public entry point for a navigation session.
# Owns no business logic — delegates everything to specialist modules.

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .instruction_sequencer import InstructionSequencer
from .models import (
    Coord, GuidanceEvent, Instruction, RoadCondition, SpeedCamera,
)
from .nav_config import NavConfig
from .nav_logger import NavLogger
from .proximity_alerts import ProximityAlertEngine
from .road_data import default_road_conditions, default_speed_cameras
from .route_parser import parse_steps

logger = logging.getLogger(__name__)


@dataclass
class SessionUpdate:
    """Everything one position fix produced."""
    guidance: Optional[GuidanceEvent]
    hazard_alert: Optional[RoadCondition]
    camera_alert: Optional[SpeedCamera]
    new_hazard_alert: bool = False
    new_camera_alert: bool = False


class NavigationSession:
    """
    High-level navigation facade.

    Typical lifecycle:
        session = NavigationSession(config, speech=VoiceAnnouncer())
        session.start_from_osrm(route["legs"][0]["steps"])

        # GPS loop:
        update = session.update(lat, lng)

    Args:
        config:  Optional NavConfig; defaults to NavConfig().
        speech:  speak(text, priority) / stop() sink, or None for silent guidance.
        hazards: Road conditions; defaults to the Nairobi seed data.
        cameras: Speed cameras; defaults to the Nairobi seed data.
    """

    def __init__(
        self,
        config: Optional[NavConfig] = None,
        speech=None,
        hazards: Optional[Iterable[RoadCondition]] = None,
        cameras: Optional[Iterable[SpeedCamera]] = None,
    ) -> None:
        self.config = config or NavConfig()

        # Specialist modules
        self._sequencer = InstructionSequencer(speech, self.config)
        self._alerts = ProximityAlertEngine(
            default_road_conditions() if hazards is None else hazards,
            default_speed_cameras() if cameras is None else cameras,
            self.config,
        )
        self._logger = NavLogger(self.config)
        self._active = False

    # ------------------------------------------------------------------
    # Navigation control
    # ------------------------------------------------------------------

    def start_navigation(self, instructions: List[Instruction]) -> Tuple[bool, str]:
        """
        Begin a session on a computed instruction list.

        Returns:
            (success, message)
        """
        if not instructions:
            logger.warning("Cannot start navigation without instructions.")
            return False, "Route has no instructions."

        self._alerts.reset_session()
        self._sequencer.load_instructions(instructions)
        self._logger.save_route(instructions)
        self._active = True

        logger.info(f"Route ready — {len(instructions)} steps. First: {instructions[0].text}")
        return True, f"Route ready. {len(instructions)} steps."

    def start_from_osrm(self, steps: List[Dict[str, Any]]) -> Tuple[bool, str]:
        """Same as start_navigation(), from raw OSRM route steps."""
        return self.start_navigation(parse_steps(steps))

    def stop_navigation(self) -> None:
        """End the current session; dismissals do not carry over to the next one."""
        self._active = False
        self._sequencer.load_instructions([])
        self._sequencer.stop_speaking()
        self._alerts.reset_session()
        logger.info("Navigation stopped by user.")

    # ------------------------------------------------------------------
    # GPS update — call this on every position fix
    # ------------------------------------------------------------------

    def update(self, lat: float, lng: float) -> SessionUpdate:
        """
        Feed one position fix to guidance and proximity alerts.

        Args:
            lat, lng: Current position in decimal degrees.

        Returns:
            SessionUpdate with the guidance event (if any) and the active alerts.
        """
        guidance = self._sequencer.update_position(lat, lng) if self._active else None
        proximity = self._alerts.check_proximity(lat, lng)

        if guidance is not None:
            self._logger.log_guidance(guidance, lat, lng)
            if self._sequencer.is_finished:
                self._active = False
        if proximity.hazard_changed:
            self._logger.log_event("hazard_alert", lat, lng, {"id": proximity.hazard_alert.id})
        if proximity.camera_changed:
            self._logger.log_event("camera_alert", lat, lng, {"id": proximity.camera_alert.id})

        return SessionUpdate(
            guidance=guidance,
            hazard_alert=proximity.hazard_alert,
            camera_alert=proximity.camera_alert,
            new_hazard_alert=proximity.hazard_changed,
            new_camera_alert=proximity.camera_changed,
        )

    # ------------------------------------------------------------------
    # Alerts
    # ------------------------------------------------------------------

    def dismiss_hazard_alert(self) -> Optional[str]:
        return self._alerts.dismiss_hazard_alert()

    def dismiss_camera_alert(self) -> Optional[str]:
        return self._alerts.dismiss_camera_alert()

    def report_condition(self, type: str, location: Coord, name: str,
                         description: str = "", severity: str = "medium") -> RoadCondition:
        condition = self._alerts.report(type, location, name, description, severity)
        self._logger.log_event("report", location.lat, location.lng, {"id": condition.id, "type": condition.type.value})
        return condition

    # ------------------------------------------------------------------
    # Convenience read-only properties
    # ------------------------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def sequencer(self) -> InstructionSequencer:
        return self._sequencer

    @property
    def alerts(self) -> ProximityAlertEngine:
        return self._alerts

    @property
    def current_instruction(self) -> Optional[Instruction]:
        return self._sequencer.current_instruction

    @property
    def upcoming_instructions(self) -> List[Instruction]:
        return self._sequencer.upcoming_instructions

    @property
    def remaining_steps(self) -> int:
        return self._sequencer.remaining_steps
