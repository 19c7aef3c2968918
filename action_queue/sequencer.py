"""
ActionQueue: a cursor that walks a nested action tree one leaf per call.

The queue never runs on its own. Every call to ``start``/``next`` (or the
equivalent methods) moves the cursor to the next leaf, crossing branch
boundaries as needed, and invokes exactly that leaf.
"""

from __future__ import annotations

import math
import numbers
from typing import Any, Callable, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from .slots import Branch, EmptyQueueError, Leaf, Slot, SlotTypeError


class ActionQueue:
    """Depth-first sequencer over a tree of ``Leaf`` and ``Branch`` slots.

    Cursor state is the current branch plus an index into it. Every descent
    pushes the parent position on an ancestor stack, so ``ascend`` can restore
    it exactly.
    """

    def __init__(self, slots: Iterable[Any] = (), name: Optional[str] = None) -> None:
        self._root = Branch(list(slots), name=name)
        self._current: Optional[Branch] = self._root
        self._index: Optional[int] = 0
        self._ancestors: List[Tuple[Branch, int]] = []
        self._on_log: Optional[Callable[[str], None]] = None

        # Callback-safe entry points: they always act on this instance, no
        # matter which object or framework ends up calling them.
        queue = self

        def start(context: Any = None, *args: Any) -> "ActionQueue":
            return queue.advance_and_run(context, *args)

        def next_step(context: Any = None, *args: Any) -> "ActionQueue":
            return queue.run_next(context, *args)

        self.start = self.execute = self.loop = start
        self.next = self.cycle = next_step

    def __repr__(self) -> str:
        return f"ActionQueue(name={self._root.name!r}, path={self.path}, slots={len(self._root)})"

    # ------------------------------------------------------------------
    # Tree access
    # ------------------------------------------------------------------
    @property
    def root(self) -> Branch:
        return self._root

    @property
    def name(self) -> Optional[str]:
        return self._root.name

    def __len__(self) -> int:
        return len(self._root)

    def __iter__(self) -> Iterator[Slot]:
        return iter(self._root)

    def append(self, value: Any) -> None:
        self._root.append(value)

    def insert(self, index: int, value: Any) -> None:
        self._root.insert(index, value)

    def remove(self, value: Any) -> None:
        self._root.remove(value)

    def extend(self, values: Iterable[Any]) -> None:
        self._root.extend(values)

    # ------------------------------------------------------------------
    # Cursor introspection
    # ------------------------------------------------------------------
    @property
    def current(self) -> Optional[Branch]:
        return self._current

    @property
    def index(self) -> Optional[int]:
        return self._index

    @property
    def depth(self) -> int:
        return len(self._ancestors)

    @property
    def path(self) -> List[int]:
        """Indices from the root down to the cursor; empty when detached."""
        if self._current is None or self._index is None:
            return []
        return [index for _branch, index in self._ancestors] + [self._index]

    def peek(self) -> Optional[Slot]:
        if self._current is None:
            return None
        return self._current.slot_at(self._index)

    def on_log(self, cb: Callable[[str], None]) -> None:
        self._on_log = cb

    # ------------------------------------------------------------------
    # Advancing
    # ------------------------------------------------------------------
    def advance_and_run(self, context: Any = None, *args: Any) -> "ActionQueue":
        """Find the leaf at or after the cursor and invoke it.

        The leaf receives ``context`` followed by ``args``; its return value is
        discarded and its exceptions propagate unchanged.
        """
        leaf = self._seek_leaf()
        self._log(f"{self._format_path()} {leaf.label}")
        leaf(context, *args)
        return self

    def run_next(self, context: Any = None, *args: Any) -> "ActionQueue":
        """Step past the slot under the cursor, then behave like ``advance_and_run``."""
        if self._index is not None:
            self._index += 1
        return self.advance_and_run(context, *args)

    def _seek_leaf(self) -> Leaf:
        wrapped = False
        while True:
            slot = self.peek()
            if slot is None:
                if self._current is not None:
                    self.ascend()
                if self._current is None:
                    if not len(self._root):
                        raise EmptyQueueError("Queue has no slots")
                    # A second wrap in one search means the whole tree was
                    # walked without meeting a leaf.
                    if wrapped:
                        raise EmptyQueueError("Queue contains no reachable leaf")
                    wrapped = True
                    self.reset()
                    self._log("wrapped to start")
                else:
                    # The slot just left was the branch itself.
                    self._index += 1
            elif isinstance(slot, Branch):
                self.descend()
            else:
                return slot

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def descend(self) -> "ActionQueue":
        slot = self.peek()
        if not isinstance(slot, Branch):
            found = "nothing" if slot is None else f"leaf '{slot.label}'"
            raise SlotTypeError(f"Cannot descend at {self._format_path()}: found {found}")
        self._ancestors.append((self._current, self._index))
        self._current = slot
        self._index = 0
        return self

    def ascend(self) -> "ActionQueue":
        """Restore the position saved by the last ``descend``.

        Ascending from the root detaches the cursor (current branch and index
        become None); the next advance or ``reset`` recovers.
        """
        if self._ancestors:
            self._current, self._index = self._ancestors.pop()
        else:
            self._current = None
            self._index = None
        return self

    def reset(self) -> "ActionQueue":
        self._current = self._root
        self._index = 0
        self._ancestors.clear()
        return self

    def skip(self, count: Any = None) -> "ActionQueue":
        """Move the cursor ``count`` slots within the current branch.

        ``count`` is rounded half up. Zero, or anything that is not a number
        (None, NaN, strings, bools), skips one slot. Negative counts move
        backwards unchecked. Infinite counts land past either end of the
        current branch.
        """
        if _is_infinite(count):
            if count < 0:
                self._index = -1
            else:
                self._index = len(self._current) if self._current is not None else 0
            return self
        step = _rounded_step(count) or 1
        self._index = (self._index or 0) + step
        return self

    def goto_path(self, path: Union[int, Sequence[int]], from_root: bool = False) -> "ActionQueue":
        """Move the cursor to ``path``.

        An int sets the index in the current branch. A sequence such as
        ``[2, 1, 0]`` sets index 2, descends, sets index 1, descends, sets
        index 0. ``from_root`` resets the cursor first. If any step fails the
        cursor is left where it was before the call.
        """
        saved = (self._current, self._index, list(self._ancestors))
        try:
            if from_root:
                self.reset()
            if isinstance(path, (list, tuple)):
                for position, index in enumerate(path):
                    if position:
                        self.descend()
                    self._set_index(index)
            else:
                self._set_index(path)
        except SlotTypeError:
            self._current, self._index, self._ancestors = saved
            raise
        return self

    goto = goto_path

    def _set_index(self, index: Any) -> None:
        if isinstance(index, bool) or not isinstance(index, int):
            raise SlotTypeError(f"Queue index must be an int, got {index!r}")
        self._index = index

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _format_path(self) -> str:
        return "[" + ", ".join(str(i) for i in self.path) + "]"

    def _log(self, msg: str) -> None:
        if self._on_log:
            try:
                self._on_log(msg)
            except Exception:
                pass


def _is_number(count: Any) -> bool:
    return isinstance(count, numbers.Real) and not isinstance(count, bool)


def _is_infinite(count: Any) -> bool:
    return _is_number(count) and math.isinf(count)


def _rounded_step(count: Any) -> int:
    # Half rounds up (-1.5 -> -1), unlike Python's round().
    if not _is_number(count) or math.isnan(count):
        return 0
    return math.floor(count + 0.5)
