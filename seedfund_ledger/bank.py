"""Token balances the ledger holds and pays out from."""

from collections.abc import Callable
from contextlib import AbstractContextManager
from typing import Protocol

from seedfund_ledger.errors import InsufficientBalance, InvalidCount
from seedfund_ledger.formatters import normalize_address
from seedfund_ledger.guards import UndoLog

# (asset, sender, recipient, amount), called after balances have moved.
TransferHook = Callable[[str, str, str, int], None]


class TokenBank(Protocol):
    def balance_of(self, asset: str, holder: str) -> int:
        ...

    def transfer(self, asset: str, sender: str, recipient: str, amount: int) -> None:
        ...

    def savepoint(self) -> AbstractContextManager[None]:
        """Undo every balance change made inside the block if it raises."""
        ...


class InMemoryTokenBank:
    """Balances of fungible assets keyed by (asset, holder).

    A per-asset transfer hook models tokens that call back into the receiver
    (or anyone else) while a transfer is in flight.
    """

    def __init__(self) -> None:
        self._journal = UndoLog()
        self._balances: dict[str, dict[str, int]] = {}
        self._hooks: dict[str, TransferHook] = {}

    def balance_of(self, asset: str, holder: str) -> int:
        return self._balances.get(normalize_address(asset), {}).get(normalize_address(holder), 0)

    def mint(self, asset: str, recipient: str, amount: int) -> None:
        if amount < 0:
            raise InvalidCount(f"mint amount must be >= 0, got {amount}")
        book = self._book(asset)
        who = normalize_address(recipient)
        self._journal.set_item(book, who, book.get(who, 0) + amount)

    def transfer(self, asset: str, sender: str, recipient: str, amount: int) -> None:
        if amount < 0:
            raise InvalidCount(f"transfer amount must be >= 0, got {amount}")
        key = normalize_address(asset)
        src = normalize_address(sender)
        dst = normalize_address(recipient)
        book = self._book(key)
        available = book.get(src, 0)
        if available < amount:
            raise InsufficientBalance(f"{src} holds {available} of {key}, cannot send {amount}")
        self._journal.set_item(book, src, available - amount)
        self._journal.set_item(book, dst, book.get(dst, 0) + amount)
        hook = self._hooks.get(key)
        if hook is not None:
            hook(key, src, dst, amount)

    def _book(self, asset: str) -> dict[str, int]:
        key = normalize_address(asset)
        if key not in self._balances:
            self._journal.set_item(self._balances, key, {})
        return self._balances[key]

    def set_transfer_hook(self, asset: str, hook: TransferHook | None) -> None:
        key = normalize_address(asset)
        if hook is None:
            self._hooks.pop(key, None)
        else:
            self._hooks[key] = hook

    def savepoint(self) -> AbstractContextManager[None]:
        return self._journal.savepoint()
