"""Constants and configuration for the seed fund distribution ledger."""

from decimal import Decimal

# Fixed-point scale applied to every per-share accumulator.
PRECISION = 10**18

TOTAL_BASIS_POINTS = 100_00
DEFAULT_FEE_BPS = 100  # 1% protocol fee on every claim

# Upper bound on any window over the asset catalog (claims, pulls, pending views).
MAX_BATCH_SIZE = 50

DEFAULT_MAX_SUPPLY = 1_000
DEFAULT_PER_HOLDER_CAP = 0  # 0 disables the per-holder cap

# Address the ledger holds custodial balances under when no other address is configured.
DEFAULT_LEDGER_ADDRESS = "0x5eedf00d00000000000000000000000000000001"
DEFAULT_CUSTODIAN_ADDRESS = "0xc0570d1a00000000000000000000000000000001"

TOKEN_UNIT = 10**18
UNIT_SCALE = Decimal(TOKEN_UNIT)

# Minimal ABI for ERC-20 tokens - only balanceOf, which the custody audit reads.
ERC20_MIN_ABI: list[dict] = [
    {
        "type": "function",
        "name": "balanceOf",
        "stateMutability": "view",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
]

# Cache configuration
CACHE_DIR_NAME = ".seedfund_ledger_cache"
CACHE_VERSION = "1"  # Increment to invalidate all caches

DEFAULT_RPC_TIMEOUT = 30
