"""Validation of ledger invariants and solvency."""

from typing import Any

from seedfund_ledger.fund import SeedFund
from seedfund_ledger.models import AssetReport
from seedfund_ledger.reports import EXPORT_FORMAT, compute_asset_reports


def validate_asset_solvency(report: AssetReport, *, warn_only: bool = False) -> list[str]:
    """
    Validate that an asset never promises more than it received.

    Returns list of validation issues. If warn_only=False, raises ValueError on the first one.
    """
    issues: list[str] = []

    def _flag(msg: str) -> None:
        issues.append(msg)
        if not warn_only:
            raise ValueError(msg)

    # 1. Claims split exactly into fees and payouts.
    if report.total_fees + report.total_payouts != report.total_claimed:
        _flag(
            f"Asset {report.asset}: claim split mismatch: "
            f"fees({report.total_fees}) + payouts({report.total_payouts}) != claimed({report.total_claimed})"
        )

    # 2. Outstanding entitlement fits within what is left of the received amount.
    unpaid = report.cumulative_received - report.total_fees - report.total_payouts
    if report.outstanding > unpaid:
        _flag(
            f"Asset {report.asset}: over-distribution: outstanding={report.outstanding} > "
            f"received({report.cumulative_received}) - paid({report.total_claimed}) = {unpaid}"
        )

    # 3. Custody covers the outstanding entitlement (when a balance is known).
    if report.balance is not None and report.balance < report.outstanding:
        _flag(
            f"Asset {report.asset}: insolvent custody: balance={report.balance} < outstanding={report.outstanding}"
        )

    # 4. Non-negative counters
    for name in ("cumulative_received", "accumulator_per_share", "total_claimed", "outstanding", "stranded"):
        value = getattr(report, name)
        if value < 0:
            _flag(f"Asset {report.asset}: negative {name}: {value}")

    return issues


def validate_fund_invariants(fund: SeedFund, *, warn_only: bool = False) -> list[str]:
    """
    Check supply, debt and solvency invariants across the whole fund.

    Walks every (record, asset) pair, so this is an audit tool, not something
    to run inside an operation.
    """
    issues: list[str] = []
    supply = fund.supply

    if supply.total_records > supply.max_supply:
        msg = f"total records {supply.total_records} exceed max supply {supply.max_supply}"
        issues.append(msg)
        if not warn_only:
            raise ValueError(msg)

    if supply.total_records == supply.max_supply and not supply.transfer_unlocked:
        msg = "supply cap reached but transfers are still locked"
        issues.append(msg)
        if not warn_only:
            raise ValueError(msg)

    for asset in fund.assets():
        state = fund.asset_state(asset)
        for record_id in range(supply.total_records):
            debt = fund.debt_of(record_id, asset)
            if debt > state.accumulator_per_share:
                msg = (
                    f"Asset {asset}: record #{record_id} debt {debt} exceeds "
                    f"accumulator {state.accumulator_per_share}"
                )
                issues.append(msg)
                if not warn_only:
                    raise ValueError(msg)

    for report in compute_asset_reports(fund):
        issues.extend(validate_asset_solvency(report, warn_only=warn_only))

    return issues


def validate_ledger_export(
    export: dict[str, Any],
    reports: list[AssetReport],
    balances: dict[str, int],
    *,
    warn_only: bool = True,
) -> list[str]:
    """
    Validate an exported ledger state against independently fetched custody balances.

    Returns list of warnings. By default, only warns (doesn't raise).
    """
    issues: list[str] = []

    fmt = export.get("format")
    if fmt and fmt != EXPORT_FORMAT:
        msg = f"Unexpected export format: {fmt} (expected {EXPORT_FORMAT})"
        issues.append(msg)
        if not warn_only:
            raise ValueError(msg)

    for report in reports:
        balance = balances.get(report.asset)
        if balance is None:
            msg = f"Asset {report.asset}: no on-chain balance available"
            issues.append(msg)
            if not warn_only:
                raise ValueError(msg)
            continue
        if report.balance is not None and report.balance != balance:
            issues.append(
                f"Asset {report.asset}: exported balance {report.balance} differs from on-chain {balance} "
                "(claims or pulls since export?)"
            )
        checked = AssetReport(**{**report.__dict__, "balance": balance})
        issues.extend(validate_asset_solvency(checked, warn_only=warn_only))

    return issues

