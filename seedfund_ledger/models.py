"""Data models for the distribution ledger."""

from dataclasses import dataclass

from seedfund_ledger.constants import (
    DEFAULT_FEE_BPS,
    DEFAULT_LEDGER_ADDRESS,
    DEFAULT_MAX_SUPPLY,
    DEFAULT_PER_HOLDER_CAP,
    MAX_BATCH_SIZE,
)


@dataclass(frozen=True)
class ShareRecord:
    """A single ownership record. Never destroyed; only its holder changes."""

    record_id: int
    holder: str
    created_at: str


@dataclass
class AssetState:
    """Accounting state for one external asset type."""

    asset: str
    index: int
    # Monotonic counters. `accumulator_per_share` is scaled by PRECISION.
    cumulative_received: int = 0
    accumulator_per_share: int = 0
    registered: bool = True
    # Reporting only: gross claimed, split into fees and net payouts.
    total_claimed: int = 0
    total_fees: int = 0
    total_payouts: int = 0
    # Value received while no record existed; never enters the accumulator.
    stranded: int = 0


@dataclass
class SupplyState:
    total_records: int
    max_supply: int
    per_holder_cap: int
    deposit_window_open: bool
    transfer_unlocked: bool = False


@dataclass(frozen=True)
class FeeConfig:
    fee_bps: int
    fee_sink: str


@dataclass(frozen=True)
class FundConfig:
    """Static configuration a fund is created with."""

    admin: str
    fee_sink: str
    max_supply: int = DEFAULT_MAX_SUPPLY
    per_holder_cap: int = DEFAULT_PER_HOLDER_CAP
    fee_bps: int = DEFAULT_FEE_BPS
    max_batch_size: int = MAX_BATCH_SIZE
    deposit_window_open: bool = True
    ledger_address: str = DEFAULT_LEDGER_ADDRESS


@dataclass(frozen=True)
class PendingEntry:
    asset: str
    amount: int


@dataclass(frozen=True)
class ClaimResult:
    """Outcome of one successful (record, asset) claim."""

    record_id: int
    asset: str
    holder: str
    gross: int
    fee: int
    payout: int


@dataclass(frozen=True)
class PullResult:
    """Outcome of one custodian pull. `amount` is always the measured delta."""

    asset: str
    ok: bool
    amount: int = 0
    # Whatever the custodian claimed to release; informational only.
    reported: int | None = None
    newly_registered: bool = False
    error: str | None = None


@dataclass(frozen=True)
class AssetReport:
    """Per-asset solvency figures for reporting and audits."""

    asset: str
    cumulative_received: int
    accumulator_per_share: int
    total_claimed: int
    total_fees: int
    total_payouts: int
    outstanding: int
    stranded: int
    balance: int | None = None
