"""Replay of scripted fund operations against an in-memory fund."""

import sys
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from tqdm import tqdm

from seedfund_ledger.bank import InMemoryTokenBank
from seedfund_ledger.custodian import VestingCustodian
from seedfund_ledger.errors import LedgerError
from seedfund_ledger.fund import SeedFund
from seedfund_ledger.models import FundConfig
from seedfund_ledger.parsing import ScenarioStep, parse_amount


@dataclass(frozen=True)
class StepOutcome:
    index: int
    op: str
    ok: bool
    result: Any = None
    error_code: str | None = None
    error: str | None = None


@dataclass
class Simulation:
    fund: SeedFund
    bank: InMemoryTokenBank
    custodian: VestingCustodian


def build_simulation(config: FundConfig, *, time_provider: Callable[[], str] | None = None) -> Simulation:
    bank = InMemoryTokenBank()
    custodian = VestingCustodian(bank)
    fund = SeedFund(config, bank, custodian, time_provider=time_provider)
    return Simulation(fund=fund, bank=bank, custodian=custodian)


def apply_step(sim: Simulation, step: ScenarioStep) -> Any:
    """Execute one step; ledger errors propagate to the caller."""
    a = step.args
    fund = sim.fund
    if step.op == "deposit":
        return fund.deposit(a["caller"], a["count"])
    if step.op == "transfer":
        return fund.transfer(a["caller"], a["record_id"], a["to"])
    if step.op == "vest":
        sim.custodian.vest(a["asset"], parse_amount(a))
        return None
    if step.op == "pull":
        return fund.pull(a["asset"])
    if step.op == "pull_batch":
        return fund.pull_batch(a["start"], a["count"])
    if step.op == "pull_many":
        return fund.pull_many(list(a["assets"]))
    if step.op == "claim":
        return fund.claim(a["caller"], a["record_id"], a["asset"])
    if step.op == "claim_batch":
        return fund.claim_batch(a["caller"], a["record_id"], a["start"], a["count"])
    if step.op == "set_deposit_window":
        return fund.set_deposit_window(a["caller"], a["open"])
    if step.op == "override_unlock_transfer":
        return fund.override_unlock_transfer(a["caller"])
    if step.op == "register_asset":
        return fund.register_asset(a["caller"], a["asset"])
    if step.op == "set_fee_config":
        return fund.set_fee_config(a["caller"], a["fee_bps"], a["fee_sink"])
    if step.op == "freeze_admin":
        return fund.freeze_admin(a["caller"])
    if step.op == "fail_custodian":
        sim.custodian.fail_on(a["asset"], a.get("failing", True))
        return None
    raise ValueError(f"unknown op {step.op!r}")


def run_scenario(sim: Simulation, steps: list[ScenarioStep], *, progress: bool = True) -> list[StepOutcome]:
    """Replay every step. Rejected steps are recorded and the replay continues."""
    outcomes: list[StepOutcome] = []
    with tqdm(steps, desc="🧪 Replaying scenario", unit="step", file=sys.stderr, disable=not progress) as pbar:
        for step in pbar:
            pbar.set_postfix(op=step.op)
            try:
                result = apply_step(sim, step)
            except LedgerError as ex:
                tqdm.write(f"⚠️  step {step.index} ({step.op}) rejected: {ex.code}: {ex}", file=sys.stderr)
                outcomes.append(
                    StepOutcome(index=step.index, op=step.op, ok=False, error_code=ex.code, error=str(ex))
                )
                continue
            outcomes.append(StepOutcome(index=step.index, op=step.op, ok=True, result=result))
    return outcomes
