import pytest

from seedfund_ledger.batching import BatchController, iter_windows
from seedfund_ledger.errors import BatchTooLarge, InvalidCount, InvalidRange


def test_window_clips_to_length():
    batches = BatchController(10)
    assert batches.window(0, 10, 4) == range(0, 4)
    assert batches.window(2, 1, 4) == range(2, 3)


def test_window_past_end_is_strict_for_writes_and_empty_for_reads():
    batches = BatchController(10)
    with pytest.raises(InvalidRange):
        batches.window(4, 1, 4)
    assert list(batches.window(4, 1, 4, strict=False)) == []
    assert list(batches.window(0, 1, 0, strict=False)) == []


@pytest.mark.parametrize("count, error", [(0, InvalidCount), (-3, InvalidCount), (11, BatchTooLarge)])
def test_window_count_bounds(count, error):
    with pytest.raises(error):
        BatchController(10).window(0, count, 100)


def test_controller_requires_positive_cap():
    with pytest.raises(ValueError):
        BatchController(0)


def test_iter_windows_covers_range():
    assert list(iter_windows(7, 3)) == [(0, 3), (3, 3), (6, 1)]
    assert list(iter_windows(0, 3)) == []
