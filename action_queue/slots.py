"""
Slot types for action queues.

A queue is a tree: every slot is either a ``Leaf`` (one callable step) or a
``Branch`` (an ordered sub-list of slots). Traversal code switches on these two
types explicitly instead of guessing from the raw values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator, List, Optional, Union


class QueueError(Exception):
    pass


class SlotTypeError(QueueError):
    """A slot (or index) does not have the shape the operation needs."""


class EmptyQueueError(QueueError):
    """No leaf is reachable from the root, so an advance cannot succeed."""


@dataclass
class Leaf:
    action: Callable[..., Any]
    name: Optional[str] = None

    @property
    def label(self) -> str:
        if self.name:
            return self.name
        return getattr(self.action, "__name__", None) or self.action.__class__.__name__

    def __call__(self, context: Any, *args: Any) -> None:
        self.action(context, *args)


@dataclass(eq=False)
class Branch:
    slots: List["Slot"] = field(default_factory=list)
    name: Optional[str] = None

    def __post_init__(self) -> None:
        self.slots = [to_slot(raw) for raw in self.slots]

    def __len__(self) -> int:
        return len(self.slots)

    def __iter__(self) -> Iterator["Slot"]:
        return iter(self.slots)

    def __getitem__(self, index: int) -> "Slot":
        return self.slots[index]

    def slot_at(self, index: Optional[int]) -> Optional["Slot"]:
        """Return the slot at ``index`` or None when it is outside the list.

        Negative indices count as outside; they never wrap from the end.
        """
        if index is None or index < 0 or index >= len(self.slots):
            return None
        return self.slots[index]

    def append(self, value: Any) -> None:
        self.slots.append(to_slot(value))

    def insert(self, index: int, value: Any) -> None:
        self.slots.insert(index, to_slot(value))

    def remove(self, value: Any) -> None:
        """Remove the first slot that is ``value`` or a leaf wrapping it."""
        for position, slot in enumerate(self.slots):
            if slot is value or (isinstance(slot, Leaf) and slot.action is value):
                del self.slots[position]
                return
        raise ValueError(f"{value!r} is not in this branch")

    def extend(self, values: Iterable[Any]) -> None:
        for value in values:
            self.append(value)


Slot = Union[Leaf, Branch]


def to_slot(value: Any) -> Slot:
    """Coerce a raw value (callable, list/tuple, Leaf, Branch) into a slot."""
    if isinstance(value, (Leaf, Branch)):
        return value
    if isinstance(value, (list, tuple)):
        return Branch(list(value))
    if callable(value):
        return Leaf(value)
    raise SlotTypeError(f"Cannot use {type(value).__name__} as a queue slot")
