"""Persistence utilities for driver settings."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from models import DriverSettings


class SettingsManager:
    """Handles loading and saving driver settings to disk."""

    def __init__(self, storage_path: Optional[Path] = None) -> None:
        package_root = Path(__file__).resolve().parent
        self._storage_path = Path(storage_path) if storage_path else package_root / "settings.json"

    @property
    def storage_path(self) -> Path:
        """Absolute path to the settings file."""
        return self._storage_path

    def load(self) -> DriverSettings:
        """Load settings from disk, returning defaults if the file is missing or corrupt."""
        path = self.storage_path
        if not path.exists():
            return DriverSettings()

        try:
            raw_data = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(raw_data, dict):
                raise ValueError("Settings file has invalid structure")
            return DriverSettings.from_dict(raw_data)
        except (OSError, ValueError):
            # Keep the unreadable file next to the new one for inspection.
            try:
                path.replace(path.with_suffix(".bak"))
            except OSError:
                pass
            return DriverSettings()

    def save(self, settings: DriverSettings) -> None:
        """Persist settings atomically to disk."""
        path = self.storage_path
        path.parent.mkdir(parents=True, exist_ok=True)

        tmp_path = path.with_suffix(".tmp")
        payload = json.dumps(settings.to_dict(), indent=2, ensure_ascii=False)
        tmp_path.write_text(payload, encoding="utf-8")
        tmp_path.replace(path)
