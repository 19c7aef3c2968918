"""
Settings model for the action queue driver (CLI and step panel).
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class DriverSettings:
    """Persisted driver preferences."""

    start_hotkey: str = "F6"
    next_hotkey: str = "F7"
    skip_hotkey: str = "F8"
    reset_hotkey: str = "F9"
    quit_hotkey: str = "F10"
    last_script: Optional[str] = None
    log_max_entries: int = 100

    def hotkeys(self) -> Dict[str, str]:
        """Hotkey strings by command name, in display order."""
        return {
            "start": self.start_hotkey,
            "next": self.next_hotkey,
            "skip": self.skip_hotkey,
            "reset": self.reset_hotkey,
            "quit": self.quit_hotkey,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Serialize settings to primitive types for JSON storage."""
        return {
            "start_hotkey": self.start_hotkey,
            "next_hotkey": self.next_hotkey,
            "skip_hotkey": self.skip_hotkey,
            "reset_hotkey": self.reset_hotkey,
            "quit_hotkey": self.quit_hotkey,
            "last_script": self.last_script,
            "log_max_entries": self.log_max_entries,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "DriverSettings":
        """Create settings from a JSON dictionary, falling back to defaults per field."""
        defaults = DriverSettings()
        last_script = data.get("last_script")
        try:
            max_entries = max(1, int(data.get("log_max_entries", defaults.log_max_entries)))
        except (TypeError, ValueError):
            max_entries = defaults.log_max_entries

        return DriverSettings(
            start_hotkey=str(data.get("start_hotkey") or defaults.start_hotkey),
            next_hotkey=str(data.get("next_hotkey") or defaults.next_hotkey),
            skip_hotkey=str(data.get("skip_hotkey") or defaults.skip_hotkey),
            reset_hotkey=str(data.get("reset_hotkey") or defaults.reset_hotkey),
            quit_hotkey=str(data.get("quit_hotkey") or defaults.quit_hotkey),
            last_script=str(last_script) if last_script not in (None, "") else None,
            log_max_entries=max_entries,
        )
