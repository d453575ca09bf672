"""CLI and main logic."""

import argparse
import json
import os
import sys
from pathlib import Path

from seedfund_ledger.console import print_audit, print_fund_summary, print_step_outcomes
from seedfund_ledger.constants import DEFAULT_RPC_TIMEOUT
from seedfund_ledger.onchain import collect_custody_balances
from seedfund_ledger.parsing import parse_ledger_export, parse_scenario
from seedfund_ledger.reports import export_ledger_state
from seedfund_ledger.scenario import build_simulation, run_scenario
from seedfund_ledger.validation import validate_fund_invariants, validate_ledger_export


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse command-line arguments."""
    p = argparse.ArgumentParser(description="Pro-rata distribution ledger for a seed fund.")
    sub = p.add_subparsers(dest="command", required=True)

    sim = sub.add_parser("simulate", help="Replay a scenario file against an in-memory fund.")
    sim.add_argument("scenario", help="Scenario JSON: {'config': {...}, 'steps': [...]}.")
    sim.add_argument(
        "--state-out",
        default=None,
        help="Write the resulting ledger export (JSON) to this path, for use with `audit`.",
    )
    sim.add_argument(
        "--quiet",
        action="store_true",
        help="Hide the progress bar and the per-step listing.",
    )

    aud = sub.add_parser("audit", help="Check an exported ledger against on-chain custody balances.")
    aud.add_argument("--state", required=True, help="Ledger export written by `simulate --state-out`.")
    aud.add_argument(
        "--ledger",
        default=None,
        help="Address holding the custodial balances. Default: ledger_address from the export.",
    )
    aud.add_argument(
        "--rpc-url",
        default=None,
        help="Execution-layer RPC URL. Required if ETH_RPC_URL environment variable is not set.",
    )
    aud.add_argument("--block", type=int, default=None, help="Block to read balances at. Default: latest.")
    aud.add_argument(
        "--no-cache",
        action="store_true",
        help="Disable caching for this run (fetch all balances fresh from the network).",
    )
    return p.parse_args(argv)


def run_simulate(args: argparse.Namespace) -> int:
    path = Path(args.scenario)
    try:
        config, steps = parse_scenario(path.read_bytes())
        sim = build_simulation(config)
    except (OSError, ValueError) as ex:
        print(f"Error: failed to load scenario {path}: {ex}", file=sys.stderr)
        return 2

    outcomes = run_scenario(sim, steps, progress=not args.quiet)
    if not args.quiet:
        print_step_outcomes(outcomes)
    print_fund_summary(sim.fund)

    issues = validate_fund_invariants(sim.fund, warn_only=True)
    if issues:
        print("⚠️  Ledger invariant violations:", file=sys.stderr)
        for issue in issues:
            print(f"   {issue}", file=sys.stderr)

    if args.state_out:
        out_path = Path(args.state_out)
        out_path.write_text(json.dumps(export_ledger_state(sim.fund), indent=2), encoding="utf-8")
        print(f"ℹ️  Ledger state written to {out_path}", file=sys.stderr)

    return 1 if issues else 0


def run_audit(args: argparse.Namespace) -> int:
    state_path = Path(args.state)
    try:
        export, reports = parse_ledger_export(state_path.read_bytes())
    except (OSError, ValueError, KeyError) as ex:
        print(f"Error: failed to load ledger export {state_path}: {ex}", file=sys.stderr)
        return 2

    ledger_address = args.ledger or export.get("ledger_address")
    if not ledger_address:
        print("Error: ledger address is required (--ledger or ledger_address in the export).", file=sys.stderr)
        return 2

    try:
        from web3 import Web3
    except ImportError as ex:  # pragma: no cover
        print("Missing dependency. Run: pip install -e .", file=sys.stderr)
        raise SystemExit(2) from ex

    rpc_url = args.rpc_url or os.getenv("ETH_RPC_URL")
    if not rpc_url:
        print(
            "Error: RPC URL is required. Provide --rpc-url or set ETH_RPC_URL environment variable.",
            file=sys.stderr,
        )
        return 2

    w3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": DEFAULT_RPC_TIMEOUT}))
    if not w3.is_connected():
        print(f"Error: failed to connect to RPC at {rpc_url}", file=sys.stderr)
        return 2

    block = args.block if args.block is not None else int(w3.eth.block_number)
    balances = collect_custody_balances(
        w3,
        ledger_address,
        [r.asset for r in reports],
        block_identifier=block,
        use_cache=not args.no_cache,
    )
    print_audit(reports, balances, block_label=str(block))

    issues = validate_ledger_export(export, reports, balances, warn_only=True)
    if issues:
        print("⚠️  Audit findings:", file=sys.stderr)
        for issue in issues:
            print(f"   {issue}", file=sys.stderr)
        return 1
    return 0


def main(argv: list[str]) -> int:
    """Main entry point."""
    args = parse_args(argv)
    if args.command == "simulate":
        return run_simulate(args)
    return run_audit(args)


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
