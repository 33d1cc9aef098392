"""Send native REEF to an EVM address and reconcile both ledgers.

Usage:
    PYTHONPATH=src python scripts/send_to_evm.py --to 0x... --amount 10
"""

from reefbridge.cli import send_to_evm_main

if __name__ == "__main__":
    send_to_evm_main()
