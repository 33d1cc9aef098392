"""Print the free and reserved native balance of an SS58 address.

Usage:
    PYTHONPATH=src python scripts/native_balance.py [ADDRESS]
"""

from reefbridge.cli import native_balance_main

if __name__ == "__main__":
    native_balance_main()
