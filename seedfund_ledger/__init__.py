"""Pro-rata distribution ledger for a seed fund."""

from typing import NoReturn

__version__ = "0.1.0"


def _entry_point() -> NoReturn:
    """Entry point for the seedfund-ledger script."""
    import sys

    from seedfund_ledger.cli import main

    raise SystemExit(main(sys.argv[1:]))


def _clear_cache_entry_point() -> NoReturn:
    """Entry point for clearing the cache."""
    from seedfund_ledger.cache import clear_cache

    clear_cache()
    raise SystemExit(0)
