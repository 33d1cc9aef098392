"""Map the signer to its EVM address and print the address & balance summary.

Usage:
    PYTHONPATH=src python scripts/map_account.py [--claim]
"""

from reefbridge.cli import map_account_main

if __name__ == "__main__":
    map_account_main()
