import sys
import types

import pytest

from action_queue import actions
from action_queue.actions import (
    ActionError,
    LaunchProcessAction,
    LogAction,
    MouseClickAction,
    RunContext,
    ScrollAction,
    SendKeysAction,
    TypeTextAction,
    WaitAction,
    WindowActivateAction,
    action_from_dict,
    tokenize_keys,
)


def make_context():
    messages, sleeps = [], []
    return RunContext(logger=messages.append, sleep_hook=sleeps.append), messages, sleeps


@pytest.fixture
def fake_keyboard(monkeypatch):
    events = []

    class Controller:
        def press(self, key):
            events.append(("press", key))

        def release(self, key):
            events.append(("release", key))

    key_mod = types.SimpleNamespace(enter="KEY_ENTER", tab="KEY_TAB")
    pynput = types.ModuleType("pynput")
    keyboard = types.ModuleType("pynput.keyboard")
    keyboard.Controller = Controller
    keyboard.Key = key_mod
    pynput.keyboard = keyboard
    monkeypatch.setitem(sys.modules, "pynput", pynput)
    monkeypatch.setitem(sys.modules, "pynput.keyboard", keyboard)
    monkeypatch.setattr(sys, "platform", "linux")
    return events


@pytest.fixture
def fake_pyautogui(monkeypatch):
    calls = []
    module = types.ModuleType("pyautogui")
    module.click = lambda **kwargs: calls.append(("click", kwargs))
    module.scroll = lambda amount: calls.append(("scroll", amount))
    module.hscroll = lambda amount: calls.append(("hscroll", amount))
    monkeypatch.setitem(sys.modules, "pyautogui", module)
    return calls


def test_log_and_wait_use_the_run_context():
    ctx, messages, sleeps = make_context()

    LogAction(message="hello")(ctx)
    WaitAction(milliseconds=250)(ctx)
    WaitAction(milliseconds=-5)(ctx)

    assert messages == ["hello"]
    assert sleeps == [0.25, 0.0]


def test_action_without_run_context_uses_default(monkeypatch):
    slept = []
    monkeypatch.setattr(actions.time, "sleep", slept.append)

    WaitAction(milliseconds=10)(None, "extra", "args")
    LogAction(message="nobody listens")(object())

    assert slept == [0.01]


def test_tokenize_keys_keeps_bracket_tokens():
    assert tokenize_keys("Hello<ENTER>World foo") == ["Hello", "<ENTER>", "World", "foo"]
    assert tokenize_keys("<TAB><TAB>x") == ["<TAB>", "<TAB>", "x"]
    assert tokenize_keys("a <b") == ["a", "<b"]
    assert tokenize_keys("") == []


def test_send_keys_presses_tokens_and_literals(fake_keyboard):
    ctx, _messages, sleeps = make_context()

    SendKeysAction(sequence="ab<ENTER>")(ctx)

    assert fake_keyboard == [
        ("press", "a"), ("release", "a"),
        ("press", "b"), ("release", "b"),
        ("press", "KEY_ENTER"), ("release", "KEY_ENTER"),
    ]
    assert sleeps == [0.05]


def test_send_keys_unknown_backend_key_raises(fake_keyboard):
    ctx, _messages, _sleeps = make_context()

    with pytest.raises(ActionError):
        SendKeysAction(sequence="<ESC>")(ctx)


def test_type_text_types_each_character(fake_keyboard):
    ctx, _messages, sleeps = make_context()

    TypeTextAction(text="hi")(ctx)

    assert [key for kind, key in fake_keyboard if kind == "press"] == ["h", "i"]
    assert sleeps == [0.01, 0.01, 0.1]


def test_empty_keyboard_actions_do_nothing(fake_keyboard):
    ctx, _messages, sleeps = make_context()

    SendKeysAction(sequence="")(ctx)
    TypeTextAction(text="")(ctx)

    assert fake_keyboard == []
    assert sleeps == []


def test_mouse_click_at_position_and_at_cursor(fake_pyautogui):
    ctx, messages, _sleeps = make_context()

    MouseClickAction(x=10, y=20, button="right", clicks=2)(ctx)
    MouseClickAction(button="bogus", clicks=0)(ctx)

    assert fake_pyautogui == [
        ("click", {"x": 10, "y": 20, "clicks": 2, "button": "right"}),
        ("click", {"clicks": 1, "button": "left"}),
    ]
    assert messages[0].startswith("mouse_click: x=10, y=20")


def test_scroll_vertical_and_horizontal(fake_pyautogui):
    ctx, _messages, _sleeps = make_context()

    ScrollAction(amount=-3)(ctx)
    ScrollAction(amount=5, horizontal=True)(ctx)

    assert fake_pyautogui == [("scroll", -3), ("hscroll", 5)]


def test_launch_process_starts_command_and_waits(monkeypatch):
    started = []
    monkeypatch.setattr(actions.subprocess, "Popen", lambda cmd, cwd=None: started.append((cmd, cwd)))
    ctx, _messages, sleeps = make_context()

    LaunchProcessAction(command="notepad", args=["a.txt"], cwd="/tmp", wait=1.5)(ctx)

    assert started == [(["notepad", "a.txt"], "/tmp")]
    assert sleeps == [1.5]


def test_launch_process_failures_raise_action_error(monkeypatch):
    def fail(cmd, cwd=None):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(actions.subprocess, "Popen", fail)
    ctx, _messages, _sleeps = make_context()

    with pytest.raises(ActionError):
        LaunchProcessAction(command="")(ctx)
    with pytest.raises(ActionError, match="missing-tool"):
        LaunchProcessAction(command="missing-tool")(ctx)


def test_window_activate_is_windows_only(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    ctx, messages, _sleeps = make_context()

    WindowActivateAction(title="Editor")(ctx)

    assert messages == ["window_activate is only supported on Windows"]


def test_action_from_dict_builds_each_type():
    assert action_from_dict({"type": "log", "message": "m"}) == LogAction(message="m")
    assert action_from_dict({"type": " WAIT ", "milliseconds": "300"}) == WaitAction(milliseconds=300)
    assert action_from_dict({"type": "mouse_click", "x": "5", "y": 6}) == MouseClickAction(x=5, y=6)
    assert action_from_dict({"type": "launch_process", "command": "ls", "args": [1]}).args == ["1"]


def test_action_from_dict_rejects_unknown_and_malformed():
    with pytest.raises(ActionError, match="Unknown action type"):
        action_from_dict({"type": "teleport"})
    with pytest.raises(ActionError, match="Invalid 'wait'"):
        action_from_dict({"type": "wait", "milliseconds": "soon"})
