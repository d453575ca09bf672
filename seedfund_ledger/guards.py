"""Reentrancy guard and undo log for all-or-nothing operations."""

from collections.abc import Callable, Iterator, MutableMapping, MutableSequence
from contextlib import contextmanager
from typing import Any

from seedfund_ledger.errors import ReentrantCall

_MISSING = object()


class ReentrancyGuard:
    """Rejects any operation that starts while another one is still running."""

    def __init__(self) -> None:
        self._entered = False

    @property
    def entered(self) -> bool:
        return self._entered

    @contextmanager
    def enter(self, operation: str) -> Iterator[None]:
        if self._entered:
            raise ReentrantCall(f"{operation} called while another operation is in progress")
        self._entered = True
        try:
            yield
        finally:
            self._entered = False


def _restore_item(container: Any, key: Any, old: Any) -> None:
    if old is _MISSING:
        del container[key]
    else:
        container[key] = old


class UndoLog:
    """
    Write-ahead undo entries for every mutation made inside a savepoint.

    Owners route their writes through :meth:`set_item`, :meth:`set_attr` and
    :meth:`append`; each records how to put the old value back. A failing
    savepoint replays its entries newest first, so rollback costs as much as
    the operation wrote and nothing more. Writes outside any savepoint are not
    recorded.
    """

    def __init__(self) -> None:
        self._entries: list[Callable[[], None]] = []
        self._depth = 0

    @property
    def active(self) -> bool:
        return self._depth > 0

    def __len__(self) -> int:
        return len(self._entries)

    def record(self, undo: Callable[[], None]) -> None:
        if self._depth:
            self._entries.append(undo)

    def set_item(self, container: MutableMapping | MutableSequence, key: Any, value: Any) -> None:
        if self._depth:
            try:
                old = container[key]
            except (KeyError, IndexError):
                old = _MISSING
            self.record(lambda: _restore_item(container, key, old))
        container[key] = value

    def set_attr(self, obj: Any, name: str, value: Any) -> None:
        if self._depth:
            old = getattr(obj, name)
            self.record(lambda: setattr(obj, name, old))
        setattr(obj, name, value)

    def append(self, seq: MutableSequence, item: Any) -> None:
        self.record(seq.pop)
        seq.append(item)

    @contextmanager
    def savepoint(self) -> Iterator[None]:
        """Undo everything written inside the block if it raises. Savepoints nest."""
        mark = len(self._entries)
        self._depth += 1
        try:
            yield
        except BaseException:
            while len(self._entries) > mark:
                self._entries.pop()()
            raise
        finally:
            self._depth -= 1
            if not self._depth:
                self._entries.clear()
