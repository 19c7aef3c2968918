"""
Small CLI to step through a queue script without the GUI.

Usage:
    python run_script.py script.json --steps 5
    python run_script.py script.json --hotkeys

With --steps the first step uses ``start`` and the rest use ``next``. With
--hotkeys the configured start/next/skip/reset hotkeys drive the queue until
the quit hotkey is pressed.
"""

from __future__ import annotations

import argparse
import sys
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional

from action_queue import ActionError, ActionQueue, QueueError, QueueScript, RunContext
from hotkey_manager import HotkeyManager
from logger import StatusLogger
from settings_manager import SettingsManager


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Step through an action queue script.")
    parser.add_argument("script", type=str, help="Path to a JSON queue script.")
    parser.add_argument("--steps", type=int, default=1, help="Number of steps to run (default: 1).")
    parser.add_argument("--hotkeys", action="store_true", help="Advance on global hotkeys until the quit hotkey.")
    parser.add_argument("--settings", type=str, default=None, help="Settings file (hotkeys, log size).")
    parser.add_argument("--no-sleep", action="store_true", help="Skip wait/sleep delays inside actions.")
    return parser


def run_step(queue: ActionQueue, ctx: RunContext, logger: StatusLogger, first: bool) -> str:
    """Advance ``queue`` once and return the step log line."""
    if first:
        queue.start(ctx)
    else:
        queue.next(ctx)
    leaf = queue.peek()
    return logger.log_step(queue.path, leaf.label if leaf is not None else "?").message


def _run_steps(queue: ActionQueue, ctx: RunContext, logger: StatusLogger, steps: int) -> None:
    for n in range(max(0, steps)):
        print(run_step(queue, ctx, logger, first=(n == 0)))


def _run_hotkeys(queue: ActionQueue, ctx: RunContext, logger: StatusLogger, hotkeys: Dict[str, str]) -> int:
    done = threading.Event()
    lock = threading.Lock()
    started: List[bool] = [False]

    def guarded(command: Callable[[], Optional[str]]) -> Callable[[], None]:
        def handler() -> None:
            with lock:
                try:
                    line = command()
                except (QueueError, ActionError) as e:
                    logger.log_error(str(e))
                    print(f"ERROR: {e}", file=sys.stderr)
                    return
                if line:
                    print(line)
        return handler

    def advance(first: bool) -> str:
        line = run_step(queue, ctx, logger, first=first or not started[0])
        started[0] = True
        return line

    def skip() -> str:
        queue.skip()
        return f"skip -> {queue.path}"

    def reset() -> str:
        queue.reset()
        started[0] = False
        return "reset"

    manager = HotkeyManager()
    manager.register("start", hotkeys["start"], guarded(lambda: advance(True)))
    manager.register("next", hotkeys["next"], guarded(lambda: advance(False)))
    manager.register("skip", hotkeys["skip"], guarded(skip))
    manager.register("reset", hotkeys["reset"], guarded(reset))
    manager.register("quit", hotkeys["quit"], done.set)
    if not manager.enable_hotkeys():
        print("ERROR: hotkeys could not be registered.", file=sys.stderr)
        return 1

    print("Hotkeys: " + ", ".join(f"{name}={key}" for name, key in hotkeys.items()))
    try:
        done.wait()
    except KeyboardInterrupt:
        pass
    finally:
        manager.disable_hotkeys()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    path = Path(args.script)
    if not path.exists():
        print(f"File not found: {path}", file=sys.stderr)
        return 2
    try:
        script = QueueScript.from_file(path)
    except (ActionError, QueueError) as e:
        print(f"ERROR: invalid script: {e}", file=sys.stderr)
        return 2

    settings = SettingsManager(Path(args.settings) if args.settings else None).load()
    logger = StatusLogger(max_entries=settings.log_max_entries)
    ctx = RunContext(
        logger=lambda m: print(f"  {m}"),
        sleep_hook=(lambda _s: None) if args.no_sleep else None,
    )
    queue = script.build_queue()
    queue.on_log(logger.log_info)
    logger.update_status(f"Loaded '{script.name}' ({len(queue)} top-level steps)")

    try:
        if args.hotkeys:
            return _run_hotkeys(queue, ctx, logger, settings.hotkeys())
        _run_steps(queue, ctx, logger, args.steps)
    except QueueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except ActionError as e:
        print(f"ERROR: action failed: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
