"""Allow running the package as a module: python -m seedfund_ledger"""

import sys

from seedfund_ledger.cli import main

if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
