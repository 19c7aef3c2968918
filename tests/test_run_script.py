import json
from pathlib import Path

import pytest

import hotkey_manager
import run_script

REPO_ROOT = Path(__file__).resolve().parents[1]
SAMPLE = REPO_ROOT / "samples" / "demo_queue.json"


def _main(*args, settings_path):
    return run_script.main([*args, "--settings", str(settings_path)])


@pytest.fixture
def settings_path(tmp_path):
    return tmp_path / "settings.json"


def test_steps_mode_prints_each_step_and_wraps(capsys, settings_path):
    code = _main(str(SAMPLE), "--steps", "6", "--no-sleep", settings_path=settings_path)

    out = capsys.readouterr().out
    assert code == 0
    assert "  Welcome to the demo" in out
    step_lines = [line for line in out.splitlines() if line.startswith("step ")]
    assert step_lines == [
        "step 1: 0 intro",
        "step 2: 1/0 first-detail",
        "step 3: 1/1 wait",
        "step 4: 1/2/0 deep",
        "step 5: 2 outro",
        "step 6: 0 intro",
    ]


def test_missing_script_exits_with_2(capsys, tmp_path, settings_path):
    code = _main(str(tmp_path / "nope.json"), settings_path=settings_path)

    assert code == 2
    assert "File not found" in capsys.readouterr().err


def test_invalid_script_exits_with_2(capsys, tmp_path, settings_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"actions": [{"type": "teleport"}]}), encoding="utf-8")

    code = _main(str(path), settings_path=settings_path)

    assert code == 2
    assert "invalid script" in capsys.readouterr().err


def test_script_without_leaves_exits_with_1(capsys, tmp_path, settings_path):
    path = tmp_path / "empty.json"
    path.write_text(json.dumps({"actions": [[], [[]]]}), encoding="utf-8")

    code = _main(str(path), "--steps", "3", settings_path=settings_path)

    assert code == 1
    assert "no reachable leaf" in capsys.readouterr().err


def test_hotkeys_mode_drives_queue_until_quit(capsys, monkeypatch, settings_path):
    pressed = ["<f6>", "<f7>", "<f8>", "<f7>", "<f9>", "<f7>", "<f10>"]

    class PressingHotKeys:
        def __init__(self, hotkey_map):
            self.hotkey_map = hotkey_map

        def start(self):
            for key in pressed:
                self.hotkey_map[key]()

        def stop(self):
            pass

    monkeypatch.setattr(hotkey_manager, "keyboard", type("Keyboard", (), {"GlobalHotKeys": PressingHotKeys}))

    code = _main(str(SAMPLE), "--hotkeys", "--no-sleep", settings_path=settings_path)

    out = capsys.readouterr().out
    assert code == 0
    assert "Hotkeys: start=F6, next=F7, skip=F8, reset=F9, quit=F10" in out
    # start -> intro, next -> first-detail, skip past wait, next -> deep,
    # reset, next after reset runs the first leaf again
    assert [line for line in out.splitlines() if line.startswith("step ")] == [
        "step 1: 0 intro",
        "step 2: 1/0 first-detail",
        "step 3: 1/2/0 deep",
        "step 4: 0 intro",
    ]
    assert "skip -> [1, 1]" in out
    assert "reset" in out


def test_hotkeys_mode_without_backend_fails(capsys, monkeypatch, settings_path):
    monkeypatch.setattr(hotkey_manager, "keyboard", None)

    code = _main(str(SAMPLE), "--hotkeys", settings_path=settings_path)

    assert code == 1
    assert "could not be registered" in capsys.readouterr().err
