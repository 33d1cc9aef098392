"""Claim the signer's default EVM account and fund it with the demo amount.

Usage:
    PYTHONPATH=src python scripts/bridge_demo.py
"""

from reefbridge.cli import bridge_demo_main

if __name__ == "__main__":
    bridge_demo_main()
