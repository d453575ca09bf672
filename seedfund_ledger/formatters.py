"""Formatting and conversion utilities."""

from decimal import Decimal

from seedfund_ledger.constants import PRECISION, TOTAL_BASIS_POINTS, UNIT_SCALE
from seedfund_ledger.errors import InvalidAddress


def as_int(value, *, default: int = 0) -> int:
    """Convert value to int, handling various types."""
    if value is None:
        return default
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        v = value.strip().replace("_", "")
        if v.lower().startswith("0x"):
            return int(v, 16)
        return int(v)
    return int(value)


def normalize_address(value) -> str:
    """Normalize an address or asset id to its lowercase canonical form."""
    if isinstance(value, (bytes, bytearray)):
        value = f"0x{value.hex()}"
    s = str(value).strip().lower() if value is not None else ""
    if not s:
        raise InvalidAddress("address must be a non-empty string")
    return s


def short_address(address: str) -> str:
    if len(address) <= 16:
        return address
    return f"{address[:10]}...{address[-6:]}"


def format_bp(bp: int) -> str:
    """Format basis points as percentage."""
    return f"{(Decimal(bp) / Decimal(100)):.2f}%"


def format_units(value: int, *, decimals: int = 6, approx: bool = False) -> str:
    """Format a base-unit amount as whole token units."""
    units = Decimal(value) / UNIT_SCALE
    s = f"{units:.{decimals}f}".rstrip("0").rstrip(".")
    prefix = "~" if approx else ""
    return f"{prefix}{s}"


def format_accumulator(value: int, *, decimals: int = 6) -> str:
    """Format a PRECISION-scaled accumulator as token units per record."""
    per_record = Decimal(value) / Decimal(PRECISION) / UNIT_SCALE
    s = f"{per_record:.{decimals}f}".rstrip("0").rstrip(".")
    return f"{s}/record"


def fee_split(gross: int, fee_bps: int) -> tuple[int, int]:
    """Split a gross claim into (fee, payout). The fee rounds down."""
    fee = gross * fee_bps // TOTAL_BASIS_POINTS
    return fee, gross - fee
