"""Custodian bridge: pulls vested balances and feeds measured inflows into the ledger."""

import sys
from typing import Protocol

from seedfund_ledger.bank import InMemoryTokenBank, TokenBank
from seedfund_ledger.batching import BatchController
from seedfund_ledger.catalog import AssetCatalog
from seedfund_ledger.constants import DEFAULT_CUSTODIAN_ADDRESS
from seedfund_ledger.errors import CustodianCallFailed
from seedfund_ledger.events import EventLog, PullFailed
from seedfund_ledger.formatters import normalize_address
from seedfund_ledger.ledger import DistributionLedger
from seedfund_ledger.models import PullResult


class Custodian(Protocol):
    def release(self, asset: str, beneficiary: str) -> int:
        """Release whatever has vested for `asset` to `beneficiary`. The return value is untrusted."""
        ...


class VestingCustodian:
    """In-memory custodian holding vested balances under its own address.

    Supports failure injection and misreporting so callers can be exercised
    against a custodian that reverts or lies about what it released.
    """

    def __init__(self, bank: InMemoryTokenBank, address: str = DEFAULT_CUSTODIAN_ADDRESS) -> None:
        self._bank = bank
        self._address = normalize_address(address)
        self._failing: set[str] = set()
        self._reported: dict[str, int] = {}

    @property
    def address(self) -> str:
        return self._address

    def vest(self, asset: str, amount: int) -> None:
        self._bank.mint(asset, self._address, amount)

    def releasable(self, asset: str) -> int:
        return self._bank.balance_of(asset, self._address)

    def fail_on(self, asset: str, failing: bool = True) -> None:
        key = normalize_address(asset)
        if failing:
            self._failing.add(key)
        else:
            self._failing.discard(key)

    def misreport(self, asset: str, reported: int | None) -> None:
        key = normalize_address(asset)
        if reported is None:
            self._reported.pop(key, None)
        else:
            self._reported[key] = reported

    def release(self, asset: str, beneficiary: str) -> int:
        key = normalize_address(asset)
        if key in self._failing:
            raise CustodianCallFailed(f"custodian reverted releasing {key}")
        amount = self.releasable(key)
        if amount:
            self._bank.transfer(key, self._address, beneficiary, amount)
        return self._reported.get(key, amount)


class CustodianBridge:
    """Permissionless entry point for moving vested value into the ledger.

    The inflow credited is always the ledger's own balance delta around the
    release call. A failing release is rolled back, reported, and swallowed
    so that one broken asset never blocks the others.
    """

    def __init__(
        self,
        custodian: Custodian,
        ledger: DistributionLedger,
        catalog: AssetCatalog,
        bank: TokenBank,
        batches: BatchController,
        events: EventLog,
    ) -> None:
        self._custodian = custodian
        self._ledger = ledger
        self._catalog = catalog
        self._bank = bank
        self._batches = batches
        self._events = events

    def pull(self, asset: str) -> PullResult:
        key = normalize_address(asset)
        target = self._ledger.address
        before = self._bank.balance_of(key, target)
        try:
            with self._bank.savepoint():
                reported = self._custodian.release(key, target)
        except Exception as ex:  # pylint: disable=broad-exception-caught
            reason = str(ex) or type(ex).__name__
            print(f"⚠️  release failed for {key}: {reason}", file=sys.stderr)
            self._events.emit(PullFailed(asset=key, reason=reason))
            return PullResult(asset=key, ok=False, error=reason)

        amount = self._bank.balance_of(key, target) - before
        if amount < 0:
            print(f"⚠️  ledger balance of {key} dropped by {-amount} during release; ignoring", file=sys.stderr)
            amount = 0

        newly_registered = False
        if amount > 0:
            if not self._ledger.is_registered(key):
                self._ledger.register_asset(key)
                newly_registered = True
            self._ledger.apply_inflow(key, amount)

        return PullResult(
            asset=key,
            ok=True,
            amount=amount,
            reported=reported if isinstance(reported, int) else None,
            newly_registered=newly_registered,
        )

    def pull_batch(self, start: int, count: int) -> list[PullResult]:
        """Pull a bounded window of already-catalogued assets, each isolated from the others."""
        return [self.pull(asset) for asset in self._catalog.window(self._batches, start, count)]

    def pull_many(self, assets: list[str]) -> list[PullResult]:
        """Pull an explicit list of assets, including ones never seen before."""
        self._batches.check_count(len(assets))
        return [self.pull(asset) for asset in assets]
