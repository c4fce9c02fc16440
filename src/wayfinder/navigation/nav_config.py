# nav_config.py
# All tuneable constants in one place.
# Pass a NavConfig instance to every module that needs settings.

import os
from dataclasses import dataclass
from typing import Tuple


# ---------------------------------------------------------------------------
# Region defaults (Nairobi)
# ---------------------------------------------------------------------------

NAIROBI_VIEWBOX: Tuple[float, float, float, float] = (36.65, -1.45, 37.1, -1.15)  # minLon, minLat, maxLon, maxLat

PRINCIPAL_CITY: str = "Nairobi"

NOMINATIM_URL: str = "https://nominatim.openstreetmap.org"


# ---------------------------------------------------------------------------
# Main config
# ---------------------------------------------------------------------------

@dataclass
class NavConfig:
    # Voice guidance
    announce_radius_m: float = 200.0       # full instruction is spoken inside this radius
    reminder_radius_m: float = 50.0        # short reminder inside this radius
    passed_radius_m: float = 10.0          # closer than this → maneuver point passed
    upcoming_count: int = 3
    start_preamble: str = "Starting navigation."
    voice_enabled: bool = True
    voice_rate: int = 150
    voice_volume: float = 1.0

    # Proximity alerts
    hazard_alert_radius_m: float = 500.0
    camera_alert_radius_m: float = 300.0

    # Place search
    search_debounce_s: float = 0.3
    search_min_chars: int = 2
    search_limit: int = 8
    search_country_codes: str = "ke"
    search_viewbox: Tuple[float, float, float, float] = NAIROBI_VIEWBOX
    search_bounded: bool = False
    search_timeout_s: float = 10.0
    principal_city: str = PRINCIPAL_CITY
    nominatim_base_url: str = NOMINATIM_URL
    accept_language: str = "en"
    user_agent: str = "wayfinder-nav/0.1"

    # Logging
    log_dir: str = "."                     # directory for saved JSON files
    route_filename: str = "active_route.json"
    event_filename: str = "nav_session.jsonl"

    def __post_init__(self) -> None:
        if min(self.passed_radius_m, self.hazard_alert_radius_m, self.camera_alert_radius_m) <= 0:
            raise ValueError("Alert and guidance radii must be positive.")
        if not self.passed_radius_m < self.reminder_radius_m < self.announce_radius_m:
            raise ValueError(
                "Expected passed_radius_m < reminder_radius_m < announce_radius_m, got "
                f"{self.passed_radius_m} / {self.reminder_radius_m} / {self.announce_radius_m}"
            )

    @property
    def route_filepath(self) -> str:
        return os.path.join(self.log_dir, self.route_filename)

    @property
    def event_filepath(self) -> str:
        return os.path.join(self.log_dir, self.event_filename)
