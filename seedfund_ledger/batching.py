"""Bounded-window iteration over the asset catalog."""

from collections.abc import Iterable

from seedfund_ledger.constants import MAX_BATCH_SIZE
from seedfund_ledger.errors import BatchTooLarge, InvalidCount, InvalidRange


class BatchController:
    """Turns caller-supplied (start, count) pairs into bounded index ranges.

    No operation that touches the asset list may scan it end to end; callers
    needing full coverage issue several windows (see :func:`iter_windows`).
    """

    def __init__(self, max_batch_size: int = MAX_BATCH_SIZE) -> None:
        if max_batch_size <= 0:
            raise ValueError("max_batch_size must be > 0")
        self._max_batch_size = max_batch_size

    @property
    def max_batch_size(self) -> int:
        return self._max_batch_size

    def check_count(self, count: int) -> None:
        if count <= 0:
            raise InvalidCount(f"batch count must be > 0, got {count}")
        if count > self._max_batch_size:
            raise BatchTooLarge(f"batch count {count} exceeds maximum {self._max_batch_size}")

    def window(self, start: int, count: int, length: int, *, strict: bool = True) -> range:
        """
        Return the index range [start, start + count) clipped to `length`.

        With strict=True (state-changing operations) a start at or past the end
        raises InvalidRange. Views pass strict=False and get an empty range instead.
        """
        self.check_count(count)
        if start < 0:
            raise InvalidRange(f"start index must be >= 0, got {start}")
        if start >= length:
            if strict:
                raise InvalidRange(f"start index {start} is out of range for {length} assets")
            return range(0)
        return range(start, min(length, start + count))


def iter_windows(length: int, size: int) -> Iterable[tuple[int, int]]:
    """Iterate over (start, count) windows that together cover [0, length)."""
    if size <= 0:
        raise ValueError("size must be > 0")
    cur = 0
    while cur < length:
        yield cur, min(size, length - cur)
        cur += size
