"""Share registry: capped issuance of ownership records and the transfer lock."""

from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timezone

from seedfund_ledger.access import AccessGate, Capability
from seedfund_ledger.errors import (
    DepositWindowClosed,
    HolderCapExceeded,
    InvalidCount,
    SupplyExceeded,
    TransferLocked,
    UnknownRecord,
)
from seedfund_ledger.events import DepositWindowChanged, EventLog, RecordCreated, RecordTransferred, TransferUnlocked
from seedfund_ledger.formatters import normalize_address
from seedfund_ledger.guards import UndoLog
from seedfund_ledger.models import ShareRecord, SupplyState


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class ShareRegistry:
    def __init__(
        self,
        supply: SupplyState,
        gate: AccessGate,
        events: EventLog,
        time_provider: Callable[[], str] | None = None,
        journal: UndoLog | None = None,
    ) -> None:
        if supply.max_supply <= 0:
            raise ValueError("max_supply must be > 0")
        if supply.per_holder_cap < 0:
            raise ValueError("per_holder_cap must be >= 0")
        self._journal = journal if journal is not None else UndoLog()
        self._supply = supply
        self._gate = gate
        self._events = events
        self._time_provider = time_provider or _utc_timestamp
        self._records: list[ShareRecord] = []
        self._minted_by: dict[str, int] = {}

    @property
    def supply(self) -> SupplyState:
        return replace(self._supply)

    @property
    def total_records(self) -> int:
        return self._supply.total_records

    @property
    def transfer_unlocked(self) -> bool:
        return self._supply.transfer_unlocked

    def record(self, record_id: int) -> ShareRecord:
        if not 0 <= record_id < len(self._records):
            raise UnknownRecord(f"record #{record_id} does not exist")
        return self._records[record_id]

    def holder_of(self, record_id: int) -> str:
        return self.record(record_id).holder

    def records_of(self, holder: str) -> list[int]:
        who = normalize_address(holder)
        return [r.record_id for r in self._records if r.holder == who]

    def minted_by(self, holder: str) -> int:
        return self._minted_by.get(normalize_address(holder), 0)

    def mint(self, caller: str, count: int, on_created: Callable[[int], None]) -> list[int]:
        """
        Mint `count` sequential records to `caller`.

        `on_created` runs for each record before it is returned, so the debt
        baseline exists before anyone can claim against the record.
        """
        self._gate.require(Capability.PUBLIC, caller)
        who = normalize_address(caller)
        supply = self._supply
        if not supply.deposit_window_open:
            raise DepositWindowClosed("deposit window is closed")
        if count <= 0:
            raise InvalidCount(f"deposit count must be > 0, got {count}")
        if supply.total_records + count > supply.max_supply:
            raise SupplyExceeded(
                f"minting {count} would exceed max supply ({supply.total_records}/{supply.max_supply})"
            )
        minted = self._minted_by.get(who, 0)
        if supply.per_holder_cap and minted + count > supply.per_holder_cap:
            raise HolderCapExceeded(f"{who} would hold {minted + count} records, cap is {supply.per_holder_cap}")

        created: list[int] = []
        for _ in range(count):
            record_id = supply.total_records
            record = ShareRecord(record_id=record_id, holder=who, created_at=self._time_provider())
            self._journal.append(self._records, record)
            self._journal.set_attr(supply, "total_records", record_id + 1)
            on_created(record_id)
            self._events.emit(RecordCreated(record_id=record_id, holder=who))
            created.append(record_id)
        self._journal.set_item(self._minted_by, who, minted + count)

        if supply.total_records == supply.max_supply:
            self._unlock("supply_cap")
        return created

    def transfer(self, caller: str, record_id: int, new_holder: str) -> ShareRecord:
        current = self.record(record_id)
        is_admin = self._gate.is_admin(caller)
        if not is_admin:
            self._gate.require(Capability.HOLDER, caller, holder=current.holder)
            if not self._supply.transfer_unlocked:
                raise TransferLocked("records cannot change hands until the fund is fully subscribed")
        updated = replace(current, holder=normalize_address(new_holder))
        self._journal.set_item(self._records, record_id, updated)
        self._events.emit(
            RecordTransferred(record_id=record_id, previous_holder=current.holder, new_holder=updated.holder)
        )
        return updated

    def set_deposit_window(self, caller: str, open_: bool) -> None:
        self._gate.require(Capability.ADMIN, caller)
        self._journal.set_attr(self._supply, "deposit_window_open", bool(open_))
        self._events.emit(DepositWindowChanged(open=self._supply.deposit_window_open))

    def override_unlock_transfer(self, caller: str) -> None:
        self._gate.require(Capability.ADMIN, caller)
        self._unlock("admin_override")

    def _unlock(self, reason: str) -> None:
        if self._supply.transfer_unlocked:
            return
        self._journal.set_attr(self._supply, "transfer_unlocked", True)
        self._events.emit(TransferUnlocked(reason=reason))
