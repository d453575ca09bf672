"""Pro-rata distribution ledger.

Each asset carries a monotonically increasing accumulator: the cumulative
amount distributed per record, scaled by PRECISION. Each (record, asset) pair
carries a debt, the accumulator value at the record's creation or last claim.
What a record may claim is the floored difference between the two, so a record
never sees value that arrived before it existed, and flooring on every
division keeps the sum of all claims at or below what was actually received.
"""

from dataclasses import replace

from seedfund_ledger.access import AccessGate, Capability
from seedfund_ledger.bank import TokenBank
from seedfund_ledger.batching import BatchController
from seedfund_ledger.catalog import AssetCatalog
from seedfund_ledger.constants import PRECISION, TOTAL_BASIS_POINTS
from seedfund_ledger.errors import InvalidCount, InvalidFeeConfig, NothingToClaim, UnknownAsset
from seedfund_ledger.events import AssetRegistered, Claimed, EventLog, FeeConfigChanged, InflowApplied, InflowStranded
from seedfund_ledger.formatters import fee_split, normalize_address
from seedfund_ledger.guards import UndoLog
from seedfund_ledger.models import AssetState, ClaimResult, FeeConfig, PendingEntry
from seedfund_ledger.registry import ShareRegistry


def check_fee_config(fee_bps: int, fee_sink: str) -> FeeConfig:
    if not 0 <= fee_bps <= TOTAL_BASIS_POINTS:
        raise InvalidFeeConfig(f"fee_bps must be within 0..{TOTAL_BASIS_POINTS}, got {fee_bps}")
    if not fee_sink or not str(fee_sink).strip():
        raise InvalidFeeConfig("fee_sink must be set")
    return FeeConfig(fee_bps=fee_bps, fee_sink=normalize_address(fee_sink))


class DistributionLedger:
    def __init__(
        self,
        registry: ShareRegistry,
        catalog: AssetCatalog,
        bank: TokenBank,
        gate: AccessGate,
        batches: BatchController,
        events: EventLog,
        fee_config: FeeConfig,
        ledger_address: str,
        journal: UndoLog | None = None,
    ) -> None:
        self._journal = journal if journal is not None else UndoLog()
        self._registry = registry
        self._catalog = catalog
        self._bank = bank
        self._gate = gate
        self._batches = batches
        self._events = events
        self._fee = check_fee_config(fee_config.fee_bps, fee_config.fee_sink)
        self._address = normalize_address(ledger_address)
        self._assets: dict[str, AssetState] = {}
        self._debts: dict[int, dict[str, int]] = {}
        self._claimed: dict[int, dict[str, int]] = {}

    @property
    def fee_config(self) -> FeeConfig:
        return self._fee

    @property
    def address(self) -> str:
        return self._address

    # ------------------------------------------------------------------
    # Record and asset lifecycle
    # ------------------------------------------------------------------

    def on_record_created(self, record_id: int) -> None:
        """Baseline a new record's debt at every asset's current accumulator."""
        for asset in self._catalog.assets():
            acc = self._assets[asset].accumulator_per_share
            # Zero baselines are implicit.
            if acc:
                self._journal.set_item(self._row(self._debts, record_id), asset, acc)

    def is_registered(self, asset: str) -> bool:
        state = self._assets.get(normalize_address(asset))
        return state is not None and state.registered

    def register_asset(self, asset: str) -> AssetState:
        """
        Append a new asset with its accumulator at zero.

        Records that already exist get no debt entry for it and so start from
        zero. That is only fair because the accumulator starts at zero too;
        registering an asset with a non-zero starting accumulator would hand
        existing records value they never earned.
        """
        index = self._catalog.append(asset)
        key = self._catalog.asset_at(index)
        state = AssetState(asset=key, index=index)
        self._journal.set_item(self._assets, key, state)
        self._events.emit(AssetRegistered(asset=key, index=index))
        return state

    def admin_register_asset(self, caller: str, asset: str) -> AssetState:
        self._gate.require(Capability.ADMIN, caller)
        return self.register_asset(asset)

    def apply_inflow(self, asset: str, amount: int) -> AssetState:
        """Distribute a measured inflow across all current records."""
        if amount < 0:
            raise InvalidCount(f"inflow amount must be >= 0, got {amount}")
        state = self._require_asset(asset)
        if amount == 0:
            return state
        total = self._registry.total_records
        if total == 0:
            # Nobody to credit; the value stays in custody undistributed.
            self._journal.set_attr(state, "stranded", state.stranded + amount)
            self._events.emit(InflowStranded(asset=state.asset, amount=amount))
            return state
        acc = state.accumulator_per_share + amount * PRECISION // total
        self._journal.set_attr(state, "accumulator_per_share", acc)
        self._journal.set_attr(state, "cumulative_received", state.cumulative_received + amount)
        self._events.emit(
            InflowApplied(asset=state.asset, amount=amount, accumulator_per_share=state.accumulator_per_share)
        )
        return state

    # ------------------------------------------------------------------
    # Claims
    # ------------------------------------------------------------------

    def claim(self, caller: str, record_id: int, asset: str) -> ClaimResult:
        holder = self._registry.holder_of(record_id)
        self._gate.require(Capability.HOLDER, caller, holder=holder)
        state = self._require_asset(asset)
        result = self._settle(record_id, holder, state)
        if result is None:
            raise NothingToClaim(f"record #{record_id} has nothing to claim for {state.asset}")
        return result

    def claim_batch(self, caller: str, record_id: int, start: int, count: int) -> list[ClaimResult]:
        """Claim every asset with something due in the window; zero-pending entries are skipped."""
        holder = self._registry.holder_of(record_id)
        self._gate.require(Capability.HOLDER, caller, holder=holder)
        results: list[ClaimResult] = []
        for asset in self._catalog.window(self._batches, start, count):
            result = self._settle(record_id, holder, self._assets[asset])
            if result is not None:
                results.append(result)
        return results

    def _settle(self, record_id: int, holder: str, state: AssetState) -> ClaimResult | None:
        gross = (state.accumulator_per_share - self.debt_of(record_id, state.asset)) // PRECISION
        if gross <= 0:
            return None

        # All accounting is written before the first transfer. A token that
        # calls back into the fund mid-transfer sees nothing left to claim.
        journal = self._journal
        journal.set_item(self._row(self._debts, record_id), state.asset, state.accumulator_per_share)
        fee, payout = fee_split(gross, self._fee.fee_bps)
        history = self._row(self._claimed, record_id)
        journal.set_item(history, state.asset, history.get(state.asset, 0) + gross)
        journal.set_attr(state, "total_claimed", state.total_claimed + gross)
        journal.set_attr(state, "total_fees", state.total_fees + fee)
        journal.set_attr(state, "total_payouts", state.total_payouts + payout)

        if fee:
            self._bank.transfer(state.asset, self._address, self._fee.fee_sink, fee)
        if payout:
            self._bank.transfer(state.asset, self._address, holder, payout)
        self._events.emit(Claimed(record_id=record_id, asset=state.asset, payout=payout, fee=fee))
        return ClaimResult(
            record_id=record_id,
            asset=state.asset,
            holder=holder,
            gross=gross,
            fee=fee,
            payout=payout,
        )

    def set_fee_config(self, caller: str, fee_bps: int, fee_sink: str) -> FeeConfig:
        self._gate.require(Capability.ADMIN, caller)
        self._journal.set_attr(self, "_fee", check_fee_config(fee_bps, fee_sink))
        self._events.emit(FeeConfigChanged(fee_bps=self._fee.fee_bps, fee_sink=self._fee.fee_sink))
        return self._fee

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def pending(self, record_id: int, asset: str) -> int:
        self._registry.record(record_id)
        state = self._require_asset(asset)
        return (state.accumulator_per_share - self.debt_of(record_id, state.asset)) // PRECISION

    def pending_batch(self, record_id: int, start: int, count: int) -> list[PendingEntry]:
        """Pending amounts for a window of the catalog; truncated, never raises for a window past the end."""
        self._registry.record(record_id)
        return [
            PendingEntry(asset=asset, amount=self.pending(record_id, asset))
            for asset in self._catalog.window(self._batches, start, count, strict=False)
        ]

    def debt_of(self, record_id: int, asset: str) -> int:
        return self._debts.get(record_id, {}).get(normalize_address(asset), 0)

    def claim_history(self, record_id: int) -> dict[str, int]:
        self._registry.record(record_id)
        return dict(self._claimed.get(record_id, {}))

    def asset_state(self, asset: str) -> AssetState:
        return replace(self._require_asset(asset))

    def outstanding(self, asset: str) -> int:
        """Sum of pending over every record. Walks all records; reporting only."""
        state = self._require_asset(asset)
        return sum(
            (state.accumulator_per_share - self.debt_of(record_id, state.asset)) // PRECISION
            for record_id in range(self._registry.total_records)
        )

    def _require_asset(self, asset: str) -> AssetState:
        key = normalize_address(asset)
        state = self._assets.get(key)
        if state is None:
            raise UnknownAsset(f"asset {key} is not registered")
        return state

    def _row(self, table: dict[int, dict[str, int]], record_id: int) -> dict[str, int]:
        if record_id not in table:
            self._journal.set_item(table, record_id, {})
        return table[record_id]
