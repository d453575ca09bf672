"""Console output formatting."""

from seedfund_ledger.formatters import format_accumulator, format_bp, format_units, short_address
from seedfund_ledger.fund import SeedFund
from seedfund_ledger.models import AssetReport, ClaimResult, PullResult
from seedfund_ledger.reports import compute_asset_reports
from seedfund_ledger.scenario import StepOutcome


def print_fund_summary(fund: SeedFund) -> None:
    """Print supply, fee configuration and per-asset accounting."""
    supply = fund.supply
    fee = fund.fee_config
    print("=" * 70)
    print("🌱 SEED FUND LEDGER")
    print(f"   🏦 Ledger: {fund.ledger_address}")
    print("=" * 70)
    window = "open" if supply.deposit_window_open else "closed"
    transfers = "unlocked" if supply.transfer_unlocked else "locked"
    print(f"   🎟  Records: {supply.total_records}/{supply.max_supply}  •  deposit window {window}")
    cap = supply.per_holder_cap or "none"
    print(f"   👤 Per-holder cap: {cap}  •  transfers {transfers}")
    print(f"   💸 Fee: {format_bp(fee.fee_bps)} → {short_address(fee.fee_sink)}")
    if fund.admin_frozen:
        print("   🧊 Admin powers frozen")

    reports = compute_asset_reports(fund)
    if not reports:
        print("\n   (no assets received yet)")
        return
    for r in reports:
        print_asset_report(r)


def print_asset_report(r: AssetReport) -> None:
    print(f"\n🪙 Asset: {r.asset}")
    print("   " + "─" * 50)
    print(f"   📥 Received (cumulative): {format_units(r.cumulative_received)}")
    print(f"   📈 Accumulator:           {format_accumulator(r.accumulator_per_share)}")
    print(f"   ✅ Claimed (gross):       {format_units(r.total_claimed)}")
    print(f"      • Paid to holders:     {format_units(r.total_payouts)}")
    print(f"      • Fees:                {format_units(r.total_fees)}")
    print(f"   ⏳ Outstanding:           {format_units(r.outstanding)}")
    if r.stranded:
        print(f"   🧊 Stranded (no records): {format_units(r.stranded)}")
    if r.balance is not None:
        indicator = "🟢" if r.balance >= r.outstanding else "🔴"
        print(f"   {indicator} Custody balance:       {format_units(r.balance)}")


def describe_result(result) -> str:
    if isinstance(result, ClaimResult):
        return (
            f"record #{result.record_id} claimed {format_units(result.payout)} "
            f"(+{format_units(result.fee)} fee) of {short_address(result.asset)}"
        )
    if isinstance(result, PullResult):
        if not result.ok:
            return f"pull {short_address(result.asset)} failed: {result.error}"
        new = " (new asset)" if result.newly_registered else ""
        return f"pulled {format_units(result.amount)} of {short_address(result.asset)}{new}"
    if isinstance(result, list):
        return "; ".join(describe_result(item) for item in result) or "nothing to do"
    return "ok" if result is None else str(result)


def print_step_outcomes(outcomes: list[StepOutcome]) -> None:
    print("\n📜 Scenario steps:")
    print("─" * 70)
    for o in outcomes:
        marker = "✅" if o.ok else "❌"
        detail = describe_result(o.result) if o.ok else f"{o.error_code}: {o.error}"
        print(f"{marker} #{o.index:<3} {o.op:<26} {detail}")
    rejected = sum(1 for o in outcomes if not o.ok)
    print(f"\n   {len(outcomes) - rejected} applied, {rejected} rejected")
    print("")


def print_audit(reports: list[AssetReport], balances: dict[str, int], *, block_label: str) -> None:
    print("=" * 70)
    print(f"🔍 CUSTODY AUDIT (block {block_label})")
    print("=" * 70)
    for r in reports:
        balance = balances.get(r.asset)
        if balance is None:
            print(f"⚪ {r.asset}: balance unavailable")
            continue
        indicator = "🟢" if balance >= r.outstanding else "🔴"
        print(f"{indicator} {r.asset}")
        print(f"   • On-chain balance: {format_units(balance)}")
        print(f"   • Outstanding:      {format_units(r.outstanding)}")
        print(f"   • Surplus:          {format_units(balance - r.outstanding)}")
