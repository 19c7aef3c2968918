"""
Queue script data model and JSON parser.

A script is a JSON object with a name and a nested list of steps::

    {
      "name": "Demo",
      "actions": [
        {"type": "log", "message": "intro"},
        {"type": "group", "name": "login", "actions": [
          {"type": "type_text", "text": "user"},
          {"type": "send_keys", "sequence": "<TAB>"}
        ]},
        [{"type": "wait", "milliseconds": 200}]
      ]
    }

Groups and bare lists become branches; every other entry becomes a leaf.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
from pathlib import Path
from typing import Any, Dict, List, Union

from .actions import ActionError, action_from_dict
from .sequencer import ActionQueue
from .slots import Branch, Leaf, Slot


@dataclass
class QueueScript:
    name: str
    slots: List[Slot] = field(default_factory=list)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "QueueScript":
        if not isinstance(data, dict):
            raise ActionError("Script must be a JSON object")
        name = str(data.get("name", "Unnamed Script"))
        return QueueScript(name=name, slots=_parse_entries(data.get("actions", []) or []))

    @staticmethod
    def from_file(path: Union[str, Path]) -> "QueueScript":
        text = Path(path).read_text(encoding="utf-8")
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ActionError(f"Script is not valid JSON: {e}") from e
        return QueueScript.from_dict(data)

    def build_queue(self) -> ActionQueue:
        """Return a fresh queue over this script's steps (cursor at the start).

        Branches are rebuilt for every queue, so mutating one queue never
        changes another. Leaves are shared.
        """
        return ActionQueue([_copy_slot(slot) for slot in self.slots], name=self.name)


def _parse_entries(raw_entries: Any) -> List[Slot]:
    if not isinstance(raw_entries, list):
        raise ActionError("'actions' must be a list")
    return [_parse_entry(raw) for raw in raw_entries]


def _parse_entry(raw: Any) -> Slot:
    if isinstance(raw, list):
        return Branch(_parse_entries(raw))
    if not isinstance(raw, dict):
        raise ActionError(f"Script entries must be objects or lists, got {type(raw).__name__}")
    name = raw.get("name")
    if str(raw.get("type", "")).strip().lower() == "group":
        return Branch(_parse_entries(raw.get("actions", []) or []), name=name)
    action = action_from_dict(raw)
    return Leaf(action, name=name or action.type_name)


def _copy_slot(slot: Slot) -> Slot:
    if isinstance(slot, Branch):
        return Branch([_copy_slot(child) for child in slot], name=slot.name)
    return slot
