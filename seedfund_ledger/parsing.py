"""Scenario, configuration and ledger-export parsing."""

import json
from dataclasses import dataclass
from typing import Any

from seedfund_ledger.constants import TOKEN_UNIT
from seedfund_ledger.formatters import as_int
from seedfund_ledger.models import AssetReport, FundConfig
from seedfund_ledger.reports import report_from_dict

# op -> fields every step of that kind must carry
SCENARIO_OPS: dict[str, tuple[str, ...]] = {
    "deposit": ("caller", "count"),
    "transfer": ("caller", "record_id", "to"),
    "vest": ("asset",),
    "pull": ("asset",),
    "pull_batch": ("start", "count"),
    "pull_many": ("assets",),
    "claim": ("caller", "record_id", "asset"),
    "claim_batch": ("caller", "record_id", "start", "count"),
    "set_deposit_window": ("caller", "open"),
    "override_unlock_transfer": ("caller",),
    "register_asset": ("caller", "asset"),
    "set_fee_config": ("caller", "fee_bps", "fee_sink"),
    "freeze_admin": ("caller",),
    "fail_custodian": ("asset",),
}

# Step fields coerced to int, and fields that must be JSON booleans.
INT_FIELDS = ("count", "record_id", "start", "fee_bps")
BOOL_FIELDS = ("open", "failing")


@dataclass(frozen=True)
class ScenarioStep:
    index: int
    op: str
    args: dict[str, Any]


def _int_field(value: Any, *, where: str) -> int:
    if value is None or isinstance(value, bool):
        raise ValueError(f"{where} must be an integer, got {value!r}")
    try:
        return as_int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{where} must be an integer, got {value!r}") from None


def _bool_field(value: Any, *, where: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{where} must be true or false, got {value!r}")
    return value


def load_json_object(raw_bytes: bytes, *, what: str) -> dict[str, Any]:
    data = json.loads(raw_bytes.decode("utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Unexpected {what} format (expected JSON object)")
    return data


def parse_fund_config(data: dict[str, Any]) -> FundConfig:
    """Build a FundConfig from a JSON object. `admin` and `fee_sink` are required."""
    missing = [name for name in ("admin", "fee_sink") if not data.get(name)]
    if missing:
        raise ValueError(f"fund config is missing: {', '.join(missing)}")
    kwargs: dict[str, Any] = {"admin": str(data["admin"]), "fee_sink": str(data["fee_sink"])}
    for name in ("max_supply", "per_holder_cap", "fee_bps", "max_batch_size"):
        if name in data:
            kwargs[name] = _int_field(data[name], where=f"config.{name}")
    if "deposit_window_open" in data:
        kwargs["deposit_window_open"] = _bool_field(data["deposit_window_open"], where="config.deposit_window_open")
    if data.get("ledger_address"):
        kwargs["ledger_address"] = str(data["ledger_address"])
    return FundConfig(**kwargs)


def parse_amount(args: dict[str, Any]) -> int:
    """Read `amount` (base units) or `units` (whole tokens) from a step."""
    if "amount" in args:
        return _int_field(args["amount"], where="amount")
    if "units" in args:
        return _int_field(args["units"], where="units") * TOKEN_UNIT
    raise ValueError("step needs either 'amount' or 'units'")


def parse_scenario(raw_bytes: bytes) -> tuple[FundConfig, list[ScenarioStep]]:
    """
    Parse a scenario file.

    Layout: {"config": {...FundConfig fields...}, "steps": [{"op": "...", ...}, ...]}
    """
    data = load_json_object(raw_bytes, what="scenario")
    config = parse_fund_config(data.get("config") or {})

    steps: list[ScenarioStep] = []
    for i, entry in enumerate(data.get("steps", []) or []):
        if not isinstance(entry, dict):
            raise ValueError(f"step {i}: expected JSON object")
        op = str(entry.get("op", ""))
        required = SCENARIO_OPS.get(op)
        if required is None:
            raise ValueError(f"step {i}: unknown op {op!r}")
        missing = [name for name in required if name not in entry]
        if missing:
            raise ValueError(f"step {i} ({op}): missing {', '.join(missing)}")
        where = f"step {i} ({op})"
        args = {k: v for k, v in entry.items() if k != "op"}
        for name in INT_FIELDS:
            if name in args:
                args[name] = _int_field(args[name], where=f"{where}: {name}")
        for name in BOOL_FIELDS:
            if name in args:
                args[name] = _bool_field(args[name], where=f"{where}: {name}")
        if op == "vest":
            try:
                parse_amount(args)
            except ValueError as ex:
                raise ValueError(f"{where}: {ex}") from None
        if op == "pull_many" and not isinstance(args["assets"], list):
            raise ValueError(f"{where}: assets must be a list")
        steps.append(ScenarioStep(index=i, op=op, args=args))
    return config, steps


def parse_ledger_export(raw_bytes: bytes) -> tuple[dict[str, Any], list[AssetReport]]:
    """Parse a ledger export written by `seedfund-ledger simulate --state-out`."""
    data = load_json_object(raw_bytes, what="ledger export")
    reports = [report_from_dict(item) for item in data.get("assets", []) or [] if isinstance(item, dict)]
    return data, reports
