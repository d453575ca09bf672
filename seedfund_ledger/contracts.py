"""Contract interaction functions."""

from typing import TYPE_CHECKING, Any

from seedfund_ledger.constants import ERC20_MIN_ABI

if TYPE_CHECKING:
    from web3 import Web3  # pragma: no cover


def erc20_contract(w3: "Web3", token_address: str) -> Any:
    """Bind the minimal ERC-20 ABI to `token_address`."""
    return w3.eth.contract(address=w3.to_checksum_address(token_address), abi=ERC20_MIN_ABI)


def token_balance(contract: Any, holder: str, *, block_identifier: int | str = "latest") -> int:
    return int(contract.functions.balanceOf(holder).call(block_identifier=block_identifier))
