# proximity_alerts.py
# Nearest-hazard and nearest-camera alerts relative to the current position.
# Two independent tracks; each holds at most one active alert.
#
# Usage:
#   engine = ProximityAlertEngine(default_road_conditions(), default_speed_cameras())
#   result = engine.check_proximity(lat, lng)
#   if result.hazard_alert:
#       ...
#       engine.dismiss(AlertTrack.HAZARD)

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, FrozenSet, Iterable, List, Optional, Set, Tuple, TypeVar, Union

from .geo_utils import haversine_distance, is_valid_position
from .models import (
    AlertTrack, Coord, ProximityResult, RoadCondition, RoadConditionType,
    Severity, SpeedCamera,
)
from .nav_config import NavConfig

logger = logging.getLogger(__name__)

_Entity = TypeVar("_Entity", RoadCondition, SpeedCamera)


def _new_report_id() -> str:
    return f"user-{uuid.uuid4().hex[:12]}"


class ProximityAlertEngine:
    """
    Tracks the single nearest undismissed hazard and camera.

    Alerts are only cleared by dismiss(); leaving the radius keeps the
    current alert. Dismissed ids stay dismissed until reset_session().

    Args:
        hazards: Initial road conditions.
        cameras: Initial speed cameras.
        config:  NavConfig instance for the alert radii.
        id_factory: Callable producing ids for reported hazards.
    """

    def __init__(
        self,
        hazards: Optional[Iterable[RoadCondition]] = None,
        cameras: Optional[Iterable[SpeedCamera]] = None,
        config: Optional[NavConfig] = None,
        id_factory: Callable[[], str] = _new_report_id,
    ) -> None:
        self.config = config or NavConfig()
        self._hazards: List[RoadCondition] = list(hazards or [])
        self._cameras: List[SpeedCamera] = list(cameras or [])
        self._id_factory = id_factory

        self._dismissed_hazard_ids: Set[str] = set()
        self._dismissed_camera_ids: Set[str] = set()
        self._active_hazard: Optional[RoadCondition] = None
        self._active_camera: Optional[SpeedCamera] = None

    # ------------------------------------------------------------------
    # Read-only properties
    # ------------------------------------------------------------------

    @property
    def hazards(self) -> List[RoadCondition]:
        return list(self._hazards)

    @property
    def cameras(self) -> List[SpeedCamera]:
        return list(self._cameras)

    @property
    def active_hazard_alert(self) -> Optional[RoadCondition]:
        return self._active_hazard

    @property
    def active_camera_alert(self) -> Optional[SpeedCamera]:
        return self._active_camera

    @property
    def dismissed_hazard_ids(self) -> FrozenSet[str]:
        return frozenset(self._dismissed_hazard_ids)

    @property
    def dismissed_camera_ids(self) -> FrozenSet[str]:
        return frozenset(self._dismissed_camera_ids)

    # ------------------------------------------------------------------
    # Core method — call on every GPS update
    # ------------------------------------------------------------------

    def check_proximity(self, lat: float, lng: float) -> ProximityResult:
        """
        Re-evaluate both alert tracks for a new position.

        Args:
            lat, lng: Current position in decimal degrees.

        Returns:
            ProximityResult with the active alerts and whether either changed.
        """
        if not is_valid_position(lat, lng):
            logger.debug(f"Rejected invalid position ({lat}, {lng}).")
            return ProximityResult(self._active_hazard, self._active_camera)

        hazard_changed = False
        nearest_hazard = self._nearest(
            lat, lng, self._hazards, self._dismissed_hazard_ids,
            self.config.hazard_alert_radius_m,
        )
        if nearest_hazard and (self._active_hazard is None or nearest_hazard[0].id != self._active_hazard.id):
            self._active_hazard = nearest_hazard[0]
            hazard_changed = True
            logger.info(f"Hazard alert: {nearest_hazard[0].name} ({int(nearest_hazard[1])} m).")

        camera_changed = False
        nearest_camera = self._nearest(
            lat, lng, [c for c in self._cameras if c.active], self._dismissed_camera_ids,
            self.config.camera_alert_radius_m,
        )
        if nearest_camera and (self._active_camera is None or nearest_camera[0].id != self._active_camera.id):
            self._active_camera = nearest_camera[0]
            camera_changed = True
            logger.info(f"Camera alert: {nearest_camera[0].name} ({int(nearest_camera[1])} m).")

        return ProximityResult(self._active_hazard, self._active_camera, hazard_changed, camera_changed)

    @staticmethod
    def _nearest(
        lat: float,
        lng: float,
        entities: Iterable[_Entity],
        dismissed: Set[str],
        radius_m: float,
    ) -> Optional[Tuple[_Entity, float]]:
        """Closest undismissed entity strictly inside radius_m; first one wins ties."""
        best: Optional[Tuple[_Entity, float]] = None
        for entity in entities:
            if entity.id in dismissed:
                continue
            dist = haversine_distance(lat, lng, entity.location.lat, entity.location.lng)
            if dist < radius_m and (best is None or dist < best[1]):
                best = (entity, dist)
        return best

    # ------------------------------------------------------------------
    # Dismissal
    # ------------------------------------------------------------------

    def dismiss(self, track: AlertTrack) -> Optional[str]:
        """
        Dismiss the active alert of one track for the rest of the session.

        Returns:
            The dismissed entity id, or None if the track had no alert.
        """
        if track == AlertTrack.HAZARD:
            if self._active_hazard is None:
                return None
            dismissed_id = self._active_hazard.id
            self._dismissed_hazard_ids.add(dismissed_id)
            self._active_hazard = None
        else:
            if self._active_camera is None:
                return None
            dismissed_id = self._active_camera.id
            self._dismissed_camera_ids.add(dismissed_id)
            self._active_camera = None

        logger.info(f"Dismissed {track.value} alert {dismissed_id}.")
        return dismissed_id

    def dismiss_hazard_alert(self) -> Optional[str]:
        return self.dismiss(AlertTrack.HAZARD)

    def dismiss_camera_alert(self) -> Optional[str]:
        return self.dismiss(AlertTrack.CAMERA)

    # ------------------------------------------------------------------
    # User reports
    # ------------------------------------------------------------------

    def report(
        self,
        type: Union[RoadConditionType, str],
        location: Coord,
        name: str,
        description: str = "",
        severity: Union[Severity, str] = Severity.MEDIUM,
    ) -> RoadCondition:
        """
        Add an unverified, user-reported hazard.

        Raises:
            ValueError: unknown type/severity or out-of-range coordinates.
        """
        if not is_valid_position(location.lat, location.lng):
            raise ValueError(f"Invalid hazard location: {location}")

        condition = RoadCondition(
            id=self._id_factory(),
            type=RoadConditionType(type),
            location=location,
            name=name.strip(),
            description=description.strip(),
            severity=Severity(severity),
            verified=False,
            reported_at=datetime.now(timezone.utc),
        )
        self._hazards.append(condition)
        logger.info(f"Reported {condition.type.value} hazard {condition.id} at {location}.")
        return condition

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def reset_session(self) -> None:
        """Forget dismissals and active alerts; hazards and cameras are kept."""
        self._dismissed_hazard_ids.clear()
        self._dismissed_camera_ids.clear()
        self._active_hazard = None
        self._active_camera = None
