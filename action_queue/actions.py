"""
Script actions: small steps that can sit in a queue as leaves.

Supported actions (type field in JSON):
- log: report a message through the run context
- wait: sleep for milliseconds
- send_keys: key sequence with tokens like <ENTER> or <TAB>
- type_text: type literal text
- mouse_click: click at (x, y) or at the current cursor position
- scroll: mouse wheel scroll (vertical or horizontal)
- launch_process: start an application without waiting for it
- window_activate: bring a window to the foreground by title (Windows)

Every action is callable as ``action(context, *args)``. When ``context`` is a
RunContext it is used for logging and sleeping; any other value (None, a Tk
event, ...) falls back to a plain RunContext.

Notes
-----
Keyboard input goes through pywinauto on Windows and pynput elsewhere. Mouse
input goes through pyautogui. All backends are imported on first use so that
building and navigating a queue never needs a display.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import subprocess
import sys
import time
from typing import Any, Callable, Dict, List, Optional, Type


class ActionError(Exception):
    pass


class RunContext:
    """Logger and sleep hooks handed to actions while they run."""

    def __init__(self, logger: Optional[Callable[[str], None]] = None, sleep_hook: Optional[Callable[[float], None]] = None):
        self._logger = logger
        self._sleep = sleep_hook

    def log(self, msg: str) -> None:
        if self._logger:
            try:
                self._logger(msg)
            except Exception:
                pass

    def sleep(self, seconds: float) -> None:
        if self._sleep:
            self._sleep(seconds)
        else:
            time.sleep(seconds)

    def sleep_ms(self, ms: int) -> None:
        self.sleep(max(ms, 0) / 1000.0)


@dataclass
class BaseAction:
    """Common interface for all actions."""

    type_name = ""

    def run(self, ctx: RunContext) -> None:  # pragma: no cover - overridden
        raise NotImplementedError

    def __call__(self, context: Any = None, *args: Any) -> None:
        ctx = context if isinstance(context, RunContext) else RunContext()
        self.run(ctx)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BaseAction":  # pragma: no cover - overridden
        raise NotImplementedError


@dataclass
class LogAction(BaseAction):
    type_name = "log"
    message: str = ""

    def run(self, ctx: RunContext) -> None:
        ctx.log(self.message)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LogAction":
        return cls(message=str(data.get("message", "")))


@dataclass
class WaitAction(BaseAction):
    type_name = "wait"
    milliseconds: int = 0

    def run(self, ctx: RunContext) -> None:
        ctx.sleep_ms(self.milliseconds)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WaitAction":
        return cls(milliseconds=int(data.get("milliseconds", 0) or 0))


@dataclass
class SendKeysAction(BaseAction):
    type_name = "send_keys"
    sequence: str = ""

    _TOKEN_KEYS = {
        "<ENTER>": "enter",
        "<TAB>": "tab",
        "<ESC>": "esc",
        "<BACKSPACE>": "backspace",
        "<DELETE>": "delete",
        "<HOME>": "home",
        "<END>": "end",
        "<PAGE_UP>": "page_up",
        "<PAGE_DOWN>": "page_down",
        "<UP>": "up",
        "<DOWN>": "down",
        "<LEFT>": "left",
        "<RIGHT>": "right",
        "<SPACE>": "space",
    }

    def run(self, ctx: RunContext) -> None:
        if not self.sequence:
            return
        if _try_pywinauto_send_keys(self.sequence, ctx, pause=0.02):
            ctx.sleep(0.05)
            return
        keyboard, key_mod = _keyboard_backend()
        for token in tokenize_keys(self.sequence):
            key_name = self._TOKEN_KEYS.get(token)
            if key_name is None:
                for ch in token:
                    keyboard.press(ch)
                    keyboard.release(ch)
                continue
            key = getattr(key_mod, key_name, None)
            if key is None:
                raise ActionError(f"send_keys: backend has no key for {token}")
            keyboard.press(key)
            keyboard.release(key)
        ctx.sleep(0.05)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SendKeysAction":
        return cls(sequence=str(data.get("sequence", "")))


def tokenize_keys(sequence: str) -> List[str]:
    """Split a key sequence into <TOKEN>s and space separated literal chunks."""
    out: List[str] = []
    buf = ""
    for ch in sequence:
        if ch == "<":
            out.extend(p for p in buf.split(" ") if p)
            buf = ch
        elif ch == ">" and buf.startswith("<"):
            out.append(buf + ch)
            buf = ""
        else:
            buf += ch
    if buf.startswith("<"):
        out.append(buf)
    else:
        out.extend(p for p in buf.split(" ") if p)
    return out


@dataclass
class TypeTextAction(BaseAction):
    type_name = "type_text"
    text: str = ""

    def run(self, ctx: RunContext) -> None:
        if not self.text:
            return
        if _try_pywinauto_send_keys(self.text, ctx, pause=0.015):
            ctx.sleep(0.1)
            return
        keyboard, _key_mod = _keyboard_backend()
        for ch in self.text:
            keyboard.press(ch)
            keyboard.release(ch)
            ctx.sleep(0.01)
        ctx.sleep(0.1)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TypeTextAction":
        return cls(text=str(data.get("text", "")))


@dataclass
class MouseClickAction(BaseAction):
    type_name = "mouse_click"
    x: Optional[int] = None
    y: Optional[int] = None
    button: str = "left"  # left|right|middle
    clicks: int = 1

    def run(self, ctx: RunContext) -> None:
        button = self.button if self.button in ("left", "right", "middle") else "left"
        count = max(1, int(self.clicks or 1))
        ctx.log(f"mouse_click: x={self.x}, y={self.y}, button={button}, clicks={count}")
        pyautogui = _mouse_backend()
        try:
            if self.x is not None and self.y is not None:
                pyautogui.click(x=int(self.x), y=int(self.y), clicks=count, button=button)
            else:
                pyautogui.click(clicks=count, button=button)
        except Exception as e:  # pragma: no cover - hardware dependent
            raise ActionError(f"mouse_click failed: {e}") from e

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MouseClickAction":
        x, y = data.get("x"), data.get("y")
        return cls(
            x=int(x) if x is not None else None,
            y=int(y) if y is not None else None,
            button=str(data.get("button", "left") or "left"),
            clicks=int(data.get("clicks", 1) or 1),
        )


@dataclass
class ScrollAction(BaseAction):
    type_name = "scroll"
    amount: int = 0
    horizontal: bool = False

    def run(self, ctx: RunContext) -> None:
        ctx.log(f"scroll: amount={self.amount}, horizontal={self.horizontal}")
        pyautogui = _mouse_backend()
        try:
            if self.horizontal:
                pyautogui.hscroll(int(self.amount))
            else:
                pyautogui.scroll(int(self.amount))
        except Exception as e:  # pragma: no cover - hardware dependent
            raise ActionError(f"scroll failed: {e}") from e

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScrollAction":
        return cls(
            amount=int(data.get("amount", 0) or 0),
            horizontal=bool(data.get("horizontal", False)),
        )


@dataclass
class LaunchProcessAction(BaseAction):
    type_name = "launch_process"
    command: str = ""
    args: List[str] = field(default_factory=list)
    cwd: Optional[str] = None
    wait: float = 0.0

    def run(self, ctx: RunContext) -> None:
        if not self.command:
            raise ActionError("launch_process: 'command' is required")
        try:
            subprocess.Popen([self.command, *self.args], cwd=self.cwd)
        except OSError as e:
            raise ActionError(f"Failed to start process '{self.command}': {e}") from e
        if self.wait > 0:
            ctx.sleep(self.wait)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LaunchProcessAction":
        return cls(
            command=str(data.get("command") or ""),
            args=[str(a) for a in data.get("args", []) or []],
            cwd=data.get("cwd"),
            wait=float(data.get("wait", 0.0) or 0.0),
        )


@dataclass
class WindowActivateAction(BaseAction):
    type_name = "window_activate"
    title: str = ""

    def run(self, ctx: RunContext) -> None:
        if not self.title:
            return
        if not sys.platform.startswith("win"):
            ctx.log("window_activate is only supported on Windows")
            return
        try:
            from pywinauto import Application  # type: ignore
            app = Application(backend="uia").connect(title_re=self.title)
            app.top_window().set_focus()
        except Exception as e:  # pragma: no cover - platform specific
            ctx.log(f"window_activate failed: {e}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WindowActivateAction":
        return cls(title=str(data.get("title", "")))


ACTION_TYPES: Dict[str, Type[BaseAction]] = {
    cls.type_name: cls
    for cls in (
        LogAction,
        WaitAction,
        SendKeysAction,
        TypeTextAction,
        MouseClickAction,
        ScrollAction,
        LaunchProcessAction,
        WindowActivateAction,
    )
}


def action_from_dict(data: Dict[str, Any]) -> BaseAction:
    action_type = str(data.get("type", "")).strip().lower()
    cls = ACTION_TYPES.get(action_type)
    if cls is None:
        raise ActionError(f"Unknown action type: {action_type}")
    try:
        return cls.from_dict(data)
    except (TypeError, ValueError) as e:
        raise ActionError(f"Invalid '{action_type}' action: {e}") from e


def _keyboard_backend():
    """Return (pynput keyboard Controller instance, Key module)."""
    try:
        from pynput.keyboard import Controller, Key  # type: ignore
    except Exception as e:  # pragma: no cover - environment dependent
        raise ActionError(f"No keyboard backend available (install pynput): {e}") from e
    return Controller(), Key


def _mouse_backend():
    try:
        import pyautogui  # type: ignore
    except Exception as e:  # pragma: no cover - environment dependent
        raise ActionError(f"No mouse backend available (install pyautogui): {e}") from e
    return pyautogui


def _try_pywinauto_send_keys(text: str, ctx: RunContext, *, pause: float = 0.0) -> bool:
    """Send keys via pywinauto on Windows; return True on success."""
    if not sys.platform.startswith("win"):
        return False
    try:
        from pywinauto.keyboard import send_keys  # type: ignore
        send_keys(text, with_spaces=True, pause=max(0.0, float(pause)))
        return True
    except Exception as e:  # pragma: no cover - platform specific
        ctx.log(f"pywinauto send_keys failed: {e}")
        return False
