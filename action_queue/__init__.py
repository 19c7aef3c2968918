"""
Action queue: step through nested action lists one leaf at a time.

A queue holds a tree of callables (leaves) and sub-lists (branches). Nothing
runs by itself; each call to ``start``/``next`` advances a cursor depth-first
to the next leaf and invokes it, which makes queues a fit for scripted
sequences driven by hotkeys, buttons or timers.

Key parts
---------
- slots:        Leaf/Branch slot types and queue errors
- sequencer:    ActionQueue, the cursor and traversal engine
- actions:      Small script actions (log, wait, send_keys, mouse_click, ...)
- script_model: JSON scripts with nested groups, built into queues
"""

from .actions import ActionError, RunContext
from .script_model import QueueScript
from .sequencer import ActionQueue
from .slots import Branch, EmptyQueueError, Leaf, QueueError, SlotTypeError

__all__ = [
    "ActionError",
    "ActionQueue",
    "Branch",
    "EmptyQueueError",
    "Leaf",
    "QueueError",
    "QueueScript",
    "RunContext",
    "SlotTypeError",
]
