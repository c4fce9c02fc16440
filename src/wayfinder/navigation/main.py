# main.py
# Entry point — simulates a GPS loop feeding positions into NavigationSession.
# In production, replace simulate_route() with your real GPS source.
#
#   python -m wayfinder.navigation.main                 # silent, prints guidance
#   python -m wayfinder.navigation.main --voice         # speak through pyttsx3
#   python -m wayfinder.navigation.main --search sarit  # live place search first

import argparse
import asyncio
import logging

from .geocoding import GeocodingSearchController
from .models import GuidanceEventType
from .nav_config import NavConfig
from .navigator import NavigationSession
from .nominatim_client import NominatimClient
from .playback import simulate_route
from .route_parser import parse_steps
from ..speech.tts import VoiceAnnouncer

# ------------------------------------------------------------------
# Simulation route (Sarit Centre → KICC, Nairobi), OSRM step format
# ------------------------------------------------------------------
DEMO_STEPS = [
    {"maneuver": {"type": "depart", "modifier": "right", "location": [36.8027, -1.2647]},
     "name": "Karuna Road", "distance": 180.0, "duration": 30.0},
    {"maneuver": {"type": "turn", "modifier": "right", "location": [36.8040, -1.2655]},
     "name": "Ring Road Parklands", "distance": 950.0, "duration": 120.0},
    {"maneuver": {"type": "roundabout", "modifier": "straight", "location": [36.8100, -1.2745]},
     "name": "Waiyaki Way", "distance": 1200.0, "duration": 150.0},
    {"maneuver": {"type": "merge", "modifier": "slight left", "location": [36.8150, -1.2830]},
     "name": "Uhuru Highway", "distance": 450.0, "duration": 60.0},
    {"maneuver": {"type": "arrive", "modifier": "left", "location": [36.8172, -1.2864]},
     "name": "Harambee Avenue", "distance": 0.0, "duration": 0.0},
]


class PrintSpeech:
    """Speech sink that only prints."""

    def speak(self, text: str, priority: bool = False) -> None:
        print(f"  [TTS{'!' if priority else ''}] {text}")

    def stop(self) -> None:
        pass


async def run_search(config: NavConfig, query: str) -> None:
    async with NominatimClient(config) as client:
        controller = GeocodingSearchController(client, config)
        # Simulate typing, one keystroke at a time
        for i in range(1, len(query) + 1):
            controller.search(query[:i])
            await asyncio.sleep(config.search_debounce_s / 3)
        await controller.settle()

        if controller.last_error:
            print(f"[Search] Failed: {controller.last_error}")
        for result in controller.results:
            print(f"[Search] {result.short_name}  ({result.location.lat:.4f}, {result.location.lng:.4f})")


async def run_simulation(config: NavConfig, voice: bool, step_m: float) -> None:
    speech = VoiceAnnouncer(rate=config.voice_rate, volume=config.voice_volume) if voice else PrintSpeech()
    session = NavigationSession(config, speech=speech)

    instructions = parse_steps(DEMO_STEPS)
    success, msg = session.start_navigation(instructions)
    print(f"[Nav] {msg}")
    if not success:
        return

    print("\n--- GPS Loop Active ---")
    polyline = [i.location for i in instructions if i.location is not None]
    for position in simulate_route(polyline, step_m=step_m):
        update = session.update(position.lat, position.lng)

        if update.guidance is not None:
            g = update.guidance
            print(f"  GPS ({position.lat:.5f}, {position.lng:.5f}) → [{g.type.name}] {g.text or g.instruction.id}")
        if update.new_hazard_alert:
            hazard = update.hazard_alert
            print(f"  ⚠  {hazard.type.value}: {hazard.name} — {hazard.description}")
            session.dismiss_hazard_alert()
        if update.new_camera_alert:
            camera = update.camera_alert
            print(f"  📷 Speed camera: {camera.name} ({camera.speed_limit_kph} km/h)")
            session.dismiss_camera_alert()

        if update.guidance is not None and update.guidance.type == GuidanceEventType.ARRIVED:
            print("  ✓  Destination reached. Navigation ended.")
            break

        # Simulate GPS poll interval
        await asyncio.sleep(0.05)

    if isinstance(speech, VoiceAnnouncer):
        await speech.wait_idle()

    print("\n--- Session complete ---")
    print(f"    Log files written to: {config.log_dir}/")


def main() -> None:
    parser = argparse.ArgumentParser(description="Simulated turn-by-turn session around Nairobi.")
    parser.add_argument("--voice", action="store_true", help="speak guidance with pyttsx3")
    parser.add_argument("--search", metavar="QUERY", help="run a live place search before driving")
    parser.add_argument("--step", type=float, default=8.0, help="metres between simulated fixes")
    parser.add_argument("--log-dir", default="logs")
    args = parser.parse_args()

    # Logging setup — configure once here, all modules inherit
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    config = NavConfig(log_dir=args.log_dir)

    if args.search:
        asyncio.run(run_search(config, args.search))
    asyncio.run(run_simulation(config, args.voice, args.step))


if __name__ == "__main__":
    main()
