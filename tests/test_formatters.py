import pytest

from seedfund_ledger.constants import PRECISION, TOKEN_UNIT
from seedfund_ledger.errors import InvalidAddress
from seedfund_ledger.formatters import as_int, fee_split, format_accumulator, format_bp, format_units, normalize_address


@pytest.mark.parametrize(
    "value, expected",
    [(None, 0), (True, 1), (42, 42), ("0x10", 16), (" 1_000 ", 1000), ("7", 7), (3.0, 3)],
)
def test_as_int(value, expected):
    assert as_int(value) == expected


def test_normalize_address():
    assert normalize_address(" 0xABcd ") == "0xabcd"
    assert normalize_address(b"\x01\x02") == "0x0102"
    with pytest.raises(InvalidAddress):
        normalize_address("   ")
    with pytest.raises(InvalidAddress):
        normalize_address(None)


def test_format_helpers():
    assert format_bp(100) == "1.00%"
    assert format_bp(250) == "2.50%"
    assert format_units(99 * TOKEN_UNIT // 100) == "0.99"
    assert format_units(5 * TOKEN_UNIT, approx=True) == "~5"
    assert format_accumulator(TOKEN_UNIT * PRECISION) == "1/record"


@pytest.mark.parametrize(
    "gross, fee_bps, expected",
    [(TOKEN_UNIT, 100, (TOKEN_UNIT // 100, 99 * TOKEN_UNIT // 100)), (99, 100, (0, 99)), (10, 0, (0, 10))],
)
def test_fee_split_rounds_fee_down(gross, fee_bps, expected):
    assert fee_split(gross, fee_bps) == expected
