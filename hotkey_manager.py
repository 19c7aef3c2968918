"""Platform-agnostic hotkey manager built on top of pynput."""

from __future__ import annotations

from typing import Callable, Dict, Optional, Tuple

try:
    from pynput import keyboard  # type: ignore
except Exception as _e:  # pragma: no cover - environment dependent
    keyboard = None  # type: ignore


class HotkeyManager:
    """Binds named commands (start, next, reset, ...) to global hotkeys."""

    _SPECIAL_KEY_ALIASES: Dict[str, str] = {
        "ctrl": "ctrl",
        "control": "ctrl",
        "alt": "alt",
        "shift": "shift",
        "win": "cmd",
        "cmd": "cmd",
        "command": "cmd",
        "option": "alt",
        "super": "cmd",
        "esc": "esc",
        "escape": "esc",
        "space": "space",
        "enter": "enter",
        "tab": "tab",
    }

    def __init__(self) -> None:
        self._bindings: Dict[str, Tuple[str, Callable[[], None]]] = {}
        self._listener: Optional[object] = None
        self._is_registered = False

    def register(self, name: str, hotkey: str, callback: Callable[[], None]) -> None:
        """Bind ``callback`` to ``hotkey`` under the command ``name``.

        Takes effect on the next ``enable_hotkeys``.
        """
        self._bindings[name] = (hotkey, callback)

    def get_hotkey(self, name: str) -> Optional[str]:
        binding = self._bindings.get(name)
        return binding[0] if binding else None

    def is_enabled(self) -> bool:
        return self._is_registered

    def enable_hotkeys(self) -> bool:
        if self._is_registered:
            return True

        hotkey_map: Dict[str, Callable[[], None]] = {}
        try:
            for name, (hotkey, callback) in self._bindings.items():
                parsed = self._to_pynput_hotkey(hotkey)
                if parsed in hotkey_map:
                    raise ValueError(f"'{hotkey}' is bound twice ({name})")
                hotkey_map[parsed] = callback
        except ValueError as exc:
            print(f"Invalid hotkey definition: {exc}")
            return False

        if not hotkey_map:
            return False

        if keyboard is None:
            print("pynput/keyboard backend not available; global hotkeys disabled")
            return False
        try:
            self._listener = keyboard.GlobalHotKeys(hotkey_map)
            self._listener.start()  # type: ignore[attr-defined]
            self._is_registered = True
            return True
        except Exception as exc:  # pragma: no cover - system specific
            print(f"Failed to register hotkeys: {exc}")
            self._listener = None
            self._is_registered = False
            return False

    def disable_hotkeys(self) -> None:
        if not self._is_registered:
            return

        if self._listener is not None:
            try:
                self._listener.stop()  # type: ignore[attr-defined]
            except Exception:
                pass
            self._listener = None

        self._is_registered = False

    def update_hotkey(self, name: str, hotkey: str) -> bool:
        """Rebind command ``name``; re-registers the listener when it is active."""
        if name not in self._bindings:
            return False
        was_registered = self._is_registered
        if was_registered:
            self.disable_hotkeys()

        self._bindings[name] = (hotkey, self._bindings[name][1])

        if was_registered:
            return self.enable_hotkeys()
        return True

    def _to_pynput_hotkey(self, hotkey: str) -> str:
        if not hotkey:
            raise ValueError("Empty hotkey string")

        tokens = [token.strip() for token in hotkey.replace("+", " ").split() if token.strip()]
        if not tokens:
            raise ValueError("Hotkey contains no tokens")

        parsed: list[str] = []
        for token in tokens:
            lower_token = token.lower()

            if lower_token in self._SPECIAL_KEY_ALIASES:
                parsed.append(f"<{self._SPECIAL_KEY_ALIASES[lower_token]}>")
            elif lower_token.startswith("f") and lower_token[1:].isdigit():
                parsed.append(f"<{lower_token}>")
            elif len(lower_token) == 1:
                parsed.append(lower_token)
            else:
                raise ValueError(f"Unknown key '{token}' in '{hotkey}'")

        return "+".join(parsed)
