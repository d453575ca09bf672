"""Append-only catalog of every asset type the fund has received."""

from seedfund_ledger.batching import BatchController
from seedfund_ledger.errors import AssetAlreadyRegistered, UnknownAsset
from seedfund_ledger.formatters import normalize_address
from seedfund_ledger.guards import UndoLog


class AssetCatalog:
    """Indexed log of asset ids plus a membership map. Entries are never removed."""

    def __init__(self, journal: UndoLog | None = None) -> None:
        self._journal = journal if journal is not None else UndoLog()
        self._assets: list[str] = []
        self._index: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._assets)

    def __contains__(self, asset: object) -> bool:
        return isinstance(asset, str) and asset.strip().lower() in self._index

    def append(self, asset: str) -> int:
        key = normalize_address(asset)
        if key in self._index:
            raise AssetAlreadyRegistered(f"asset {key} is already registered")
        index = len(self._assets)
        self._journal.set_item(self._index, key, index)
        self._journal.append(self._assets, key)
        return index

    def index_of(self, asset: str) -> int:
        key = normalize_address(asset)
        try:
            return self._index[key]
        except KeyError:
            raise UnknownAsset(f"asset {key} is not registered") from None

    def asset_at(self, index: int) -> str:
        return self._assets[index]

    def assets(self) -> tuple[str, ...]:
        return tuple(self._assets)

    def window(self, batches: BatchController, start: int, count: int, *, strict: bool = True) -> list[str]:
        return [self._assets[i] for i in batches.window(start, count, len(self._assets), strict=strict)]
