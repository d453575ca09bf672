"""Seed fund facade: one serialised, all-or-nothing entry point per operation."""

from collections.abc import Callable, Iterator
from contextlib import contextmanager

from seedfund_ledger.access import AccessGate
from seedfund_ledger.bank import TokenBank
from seedfund_ledger.batching import BatchController
from seedfund_ledger.catalog import AssetCatalog
from seedfund_ledger.custodian import Custodian, CustodianBridge
from seedfund_ledger.events import AdminPowersFrozen, EventLog
from seedfund_ledger.guards import ReentrancyGuard, UndoLog
from seedfund_ledger.ledger import DistributionLedger
from seedfund_ledger.models import (
    AssetState,
    ClaimResult,
    FeeConfig,
    FundConfig,
    PendingEntry,
    PullResult,
    ShareRecord,
    SupplyState,
)
from seedfund_ledger.registry import ShareRegistry


class SeedFund:
    """
    Wires the registry, catalog, ledger and custodian bridge together.

    Every state-changing call runs inside the reentrancy guard and a journal
    savepoint: the fund's own undo log for registry, catalog, ledger, gate
    and events, and the bank's for token balances. It either completes or
    leaves no trace, and rollback only touches what the operation wrote.
    Views are plain reads.
    """

    def __init__(
        self,
        config: FundConfig,
        bank: TokenBank,
        custodian: Custodian,
        *,
        time_provider: Callable[[], str] | None = None,
    ) -> None:
        self._config = config
        self._bank = bank
        self._journal = UndoLog()
        self._events = EventLog(self._journal)
        self._gate = AccessGate(config.admin, self._journal)
        self._batches = BatchController(config.max_batch_size)
        self._catalog = AssetCatalog(self._journal)
        supply = SupplyState(
            total_records=0,
            max_supply=config.max_supply,
            per_holder_cap=config.per_holder_cap,
            deposit_window_open=config.deposit_window_open,
        )
        self._registry = ShareRegistry(supply, self._gate, self._events, time_provider, self._journal)
        self._ledger = DistributionLedger(
            self._registry,
            self._catalog,
            bank,
            self._gate,
            self._batches,
            self._events,
            FeeConfig(fee_bps=config.fee_bps, fee_sink=config.fee_sink),
            config.ledger_address,
            self._journal,
        )
        self._bridge = CustodianBridge(custodian, self._ledger, self._catalog, bank, self._batches, self._events)
        self._guard = ReentrancyGuard()

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        with self._guard.enter(name), self._journal.savepoint(), self._bank.savepoint():
            yield

    # ------------------------------------------------------------------
    # Holder and public operations
    # ------------------------------------------------------------------

    def deposit(self, caller: str, count: int) -> list[int]:
        with self._operation("deposit"):
            return self._registry.mint(caller, count, self._ledger.on_record_created)

    def transfer(self, caller: str, record_id: int, new_holder: str) -> ShareRecord:
        with self._operation("transfer"):
            return self._registry.transfer(caller, record_id, new_holder)

    def claim(self, caller: str, record_id: int, asset: str) -> ClaimResult:
        with self._operation("claim"):
            return self._ledger.claim(caller, record_id, asset)

    def claim_batch(self, caller: str, record_id: int, start: int, count: int) -> list[ClaimResult]:
        with self._operation("claim_batch"):
            return self._ledger.claim_batch(caller, record_id, start, count)

    def pull(self, asset: str) -> PullResult:
        with self._operation("pull"):
            return self._bridge.pull(asset)

    def pull_batch(self, start: int, count: int) -> list[PullResult]:
        with self._operation("pull_batch"):
            return self._bridge.pull_batch(start, count)

    def pull_many(self, assets: list[str]) -> list[PullResult]:
        with self._operation("pull_many"):
            return self._bridge.pull_many(list(assets))

    # ------------------------------------------------------------------
    # Administrative surface
    # ------------------------------------------------------------------

    def set_deposit_window(self, caller: str, open_: bool) -> None:
        with self._operation("set_deposit_window"):
            self._registry.set_deposit_window(caller, open_)

    def override_unlock_transfer(self, caller: str) -> None:
        with self._operation("override_unlock_transfer"):
            self._registry.override_unlock_transfer(caller)

    def register_asset(self, caller: str, asset: str) -> AssetState:
        with self._operation("register_asset"):
            return self._ledger.admin_register_asset(caller, asset)

    def set_fee_config(self, caller: str, fee_bps: int, fee_sink: str) -> FeeConfig:
        with self._operation("set_fee_config"):
            return self._ledger.set_fee_config(caller, fee_bps, fee_sink)

    def freeze_admin(self, caller: str) -> None:
        """Permanently give up every administrative operation, this one included."""
        with self._operation("freeze_admin"):
            self._gate.freeze(caller)
            self._events.emit(AdminPowersFrozen(admin=self._gate.admin))

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def config(self) -> FundConfig:
        return self._config

    @property
    def events(self) -> EventLog:
        return self._events

    @property
    def ledger_address(self) -> str:
        return self._ledger.address

    @property
    def fee_config(self) -> FeeConfig:
        return self._ledger.fee_config

    @property
    def admin_frozen(self) -> bool:
        return self._gate.frozen

    @property
    def supply(self) -> SupplyState:
        return self._registry.supply

    @property
    def total_records(self) -> int:
        return self._registry.total_records

    @property
    def max_batch_size(self) -> int:
        return self._batches.max_batch_size

    def assets(self) -> tuple[str, ...]:
        return self._catalog.assets()

    def asset_state(self, asset: str) -> AssetState:
        return self._ledger.asset_state(asset)

    def record(self, record_id: int) -> ShareRecord:
        return self._registry.record(record_id)

    def holder_of(self, record_id: int) -> str:
        return self._registry.holder_of(record_id)

    def records_of(self, holder: str) -> list[int]:
        return self._registry.records_of(holder)

    def minted_by(self, holder: str) -> int:
        return self._registry.minted_by(holder)

    def pending(self, record_id: int, asset: str) -> int:
        return self._ledger.pending(record_id, asset)

    def pending_batch(self, record_id: int, start: int, count: int) -> list[PendingEntry]:
        return self._ledger.pending_batch(record_id, start, count)

    def claim_history(self, record_id: int) -> dict[str, int]:
        return self._ledger.claim_history(record_id)

    def debt_of(self, record_id: int, asset: str) -> int:
        return self._ledger.debt_of(record_id, asset)

    def outstanding(self, asset: str) -> int:
        return self._ledger.outstanding(asset)

    def custody_balance(self, asset: str) -> int:
        return self._bank.balance_of(asset, self._ledger.address)
