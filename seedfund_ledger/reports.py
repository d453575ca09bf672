"""Per-asset reporting and ledger state export."""

from typing import Any

from seedfund_ledger.formatters import as_int
from seedfund_ledger.fund import SeedFund
from seedfund_ledger.models import AssetReport

EXPORT_FORMAT = "seedfund-ledger-v1"


def asset_report(fund: SeedFund, asset: str, *, with_balance: bool = True) -> AssetReport:
    """Build an AssetReport for one asset. `outstanding` walks every record."""
    state = fund.asset_state(asset)
    return AssetReport(
        asset=state.asset,
        cumulative_received=state.cumulative_received,
        accumulator_per_share=state.accumulator_per_share,
        total_claimed=state.total_claimed,
        total_fees=state.total_fees,
        total_payouts=state.total_payouts,
        outstanding=fund.outstanding(state.asset),
        stranded=state.stranded,
        balance=fund.custody_balance(state.asset) if with_balance else None,
    )


def compute_asset_reports(fund: SeedFund, *, with_balance: bool = True) -> list[AssetReport]:
    return [asset_report(fund, asset, with_balance=with_balance) for asset in fund.assets()]


def report_to_dict(report: AssetReport) -> dict[str, Any]:
    # Amounts are strings: they routinely exceed what JSON consumers can hold in a double.
    out: dict[str, Any] = {"asset": report.asset}
    for name in (
        "cumulative_received",
        "accumulator_per_share",
        "total_claimed",
        "total_fees",
        "total_payouts",
        "outstanding",
        "stranded",
    ):
        out[name] = str(getattr(report, name))
    if report.balance is not None:
        out["balance"] = str(report.balance)
    return out


def report_from_dict(data: dict[str, Any]) -> AssetReport:
    balance = data.get("balance")
    return AssetReport(
        asset=str(data["asset"]).lower(),
        cumulative_received=as_int(data.get("cumulative_received")),
        accumulator_per_share=as_int(data.get("accumulator_per_share")),
        total_claimed=as_int(data.get("total_claimed")),
        total_fees=as_int(data.get("total_fees")),
        total_payouts=as_int(data.get("total_payouts")),
        outstanding=as_int(data.get("outstanding")),
        stranded=as_int(data.get("stranded")),
        balance=as_int(balance) if balance is not None else None,
    )


def export_ledger_state(fund: SeedFund) -> dict[str, Any]:
    """Serialisable summary of the fund, consumed by `seedfund-ledger audit`."""
    supply = fund.supply
    fee = fund.fee_config
    return {
        "format": EXPORT_FORMAT,
        "ledger_address": fund.ledger_address,
        "admin_frozen": fund.admin_frozen,
        "fee": {"fee_bps": fee.fee_bps, "fee_sink": fee.fee_sink},
        "supply": {
            "total_records": supply.total_records,
            "max_supply": supply.max_supply,
            "per_holder_cap": supply.per_holder_cap,
            "deposit_window_open": supply.deposit_window_open,
            "transfer_unlocked": supply.transfer_unlocked,
        },
        "assets": [report_to_dict(r) for r in compute_asset_reports(fund)],
        "events": len(fund.events),
    }
