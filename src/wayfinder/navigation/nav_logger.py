# nav_logger.py
# Handles all file I/O for the navigation system.
# Saves the active instruction list and session events as JSON.

import json
import os
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from .models import GuidanceEvent, Instruction
from .nav_config import NavConfig

# Standard Python logger — configure at app entry point if needed
logger = logging.getLogger(__name__)


class NavLogger:
    """
    Persists instruction lists and navigation events to JSON files.

    Args:
        config: NavConfig instance for file paths and directories.
    """

    def __init__(self, config: Optional[NavConfig] = None) -> None:
        self.config = config or NavConfig()
        os.makedirs(self.config.log_dir, exist_ok=True)

    # ------------------------------------------------------------------
    # Route persistence
    # ------------------------------------------------------------------

    def save_route(self, instructions: List[Instruction]) -> bool:
        """
        Serialize an instruction list to JSON.

        Returns:
            True on success, False on failure.
        """
        filepath = self.config.route_filepath
        try:
            data = {
                "saved_at": datetime.now().isoformat(),
                "step_count": len(instructions),
                "instructions": [i.to_dict() for i in instructions],
            }
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            logger.info(f"Route saved to {filepath} ({len(instructions)} steps).")
            return True
        except (IOError, TypeError) as e:
            logger.error(f"Failed to save route to {filepath}: {e}")
            return False

    def load_route(self, filepath: Optional[str] = None) -> Optional[List[Instruction]]:
        """
        Load a previously saved instruction list from JSON.

        Args:
            filepath: Path override; uses config default if omitted.

        Returns:
            List of Instruction objects, or None if loading failed.
        """
        path = filepath or self.config.route_filepath
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            instructions = [Instruction.from_dict(i) for i in data["instructions"]]
            logger.info(f"Route loaded from {path} ({len(instructions)} steps).")
            return instructions
        except (IOError, KeyError, ValueError) as e:
            logger.error(f"Failed to load route from {path}: {e}")
            return None

    # ------------------------------------------------------------------
    # Session event logging
    # ------------------------------------------------------------------

    def log_guidance(self, event: GuidanceEvent, lat: float, lng: float) -> None:
        self.log_event(event.type.value, lat, lng, {
            "index": event.index,
            "instruction_id": event.instruction.id if event.instruction else None,
            "text": event.text,
            "distance_m": event.distance_m,
        })

    def log_event(self, kind: str, lat: Optional[float], lng: Optional[float], details: Dict[str, Any]) -> None:
        """
        Append a single navigation event to the session log file.

        Args:
            kind:    Event name ("announce", "hazard_alert", ...).
            lat:     Current latitude.
            lng:     Current longitude.
            details: Extra JSON-serialisable fields.
        """
        entry = {
            "timestamp": datetime.now().isoformat(),
            "event": kind,
            "lat": lat,
            "lng": lng,
            **details,
        }
        try:
            with open(self.config.event_filepath, "a", encoding="utf-8") as f:
                f.write(json.dumps(entry, ensure_ascii=False) + "\n")
        except IOError as e:
            logger.error(f"Failed to write event log: {e}")
