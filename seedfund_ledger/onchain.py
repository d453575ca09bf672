"""On-chain custody balances for ledger audits."""

import sys
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from tqdm import tqdm

from seedfund_ledger.cache import cache_key, get_cached, set_cached
from seedfund_ledger.contracts import erc20_contract, token_balance

if TYPE_CHECKING:
    from web3 import Web3  # pragma: no cover


def collect_custody_balances(
    w3: "Web3",
    ledger_address: str,
    assets: Iterable[str],
    *,
    block_identifier: int | str,
    use_cache: bool = True,
    contract_factory: Callable[["Web3", str], Any] = erc20_contract,
) -> dict[str, int]:
    """
    Read the ledger's balance of every asset at one block.

    Assets whose balanceOf call fails are reported on stderr and left out of
    the result. Only reads pinned to a concrete block number are cached.
    """
    asset_list = sorted({a.lower() for a in assets})
    holder = w3.to_checksum_address(ledger_address)
    cacheable = use_cache and isinstance(block_identifier, int)

    key = cache_key("balances", ledger_address.lower(), str(block_identifier), ":".join(asset_list))
    if cacheable:
        cached = get_cached(key)
        if cached is not None:
            return {asset: int(value) for asset, value in cached.items()}

    out: dict[str, int] = {}
    with tqdm(asset_list, desc="🔗 Reading custody balances", unit="asset", file=sys.stderr) as pbar:
        for asset in pbar:
            try:
                contract = contract_factory(w3, asset)
                out[asset] = token_balance(contract, holder, block_identifier=block_identifier)
            except Exception as ex:  # pylint: disable=broad-exception-caught
                tqdm.write(f"⚠️  balanceOf failed for {asset}: {ex}", file=sys.stderr)

    if cacheable and len(out) == len(asset_list):
        set_cached(key, {asset: str(value) for asset, value in out.items()})
    return out
