"""Observable ledger events for external indexers and auditors."""

from collections.abc import Iterator
from dataclasses import asdict, dataclass
from typing import Any, TypeVar

from seedfund_ledger.guards import UndoLog


@dataclass(frozen=True)
class LedgerEvent:
    def to_dict(self) -> dict[str, Any]:
        return {"event": type(self).__name__, **asdict(self)}


@dataclass(frozen=True)
class RecordCreated(LedgerEvent):
    record_id: int
    holder: str


@dataclass(frozen=True)
class RecordTransferred(LedgerEvent):
    record_id: int
    previous_holder: str
    new_holder: str


@dataclass(frozen=True)
class AssetRegistered(LedgerEvent):
    asset: str
    index: int


@dataclass(frozen=True)
class InflowApplied(LedgerEvent):
    asset: str
    amount: int
    accumulator_per_share: int


@dataclass(frozen=True)
class InflowStranded(LedgerEvent):
    asset: str
    amount: int


@dataclass(frozen=True)
class Claimed(LedgerEvent):
    record_id: int
    asset: str
    payout: int
    fee: int


@dataclass(frozen=True)
class PullFailed(LedgerEvent):
    asset: str
    reason: str


@dataclass(frozen=True)
class DepositWindowChanged(LedgerEvent):
    open: bool


@dataclass(frozen=True)
class TransferUnlocked(LedgerEvent):
    reason: str


@dataclass(frozen=True)
class FeeConfigChanged(LedgerEvent):
    fee_bps: int
    fee_sink: str


@dataclass(frozen=True)
class AdminPowersFrozen(LedgerEvent):
    admin: str


E = TypeVar("E", bound=LedgerEvent)


class EventLog:
    """Append-only event sink. Rolled back together with the operation that emitted into it."""

    def __init__(self, journal: UndoLog | None = None) -> None:
        self._journal = journal if journal is not None else UndoLog()
        self._events: list[LedgerEvent] = []

    def emit(self, event: LedgerEvent) -> None:
        self._journal.append(self._events, event)

    def of_type(self, event_type: type[E]) -> list[E]:
        return [e for e in self._events if isinstance(e, event_type)]

    def __iter__(self) -> Iterator[LedgerEvent]:
        return iter(tuple(self._events))

    def __len__(self) -> int:
        return len(self._events)
