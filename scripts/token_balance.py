"""Compare raw eth_getBalance with the ERC20 precompile view.

Usage:
    PYTHONPATH=src python scripts/token_balance.py [0xADDRESS]
"""

from reefbridge.cli import token_balance_main

if __name__ == "__main__":
    token_balance_main()
