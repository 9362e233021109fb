# src/decayledger/ledger/constants.py
from __future__ import annotations

"""Monetary constants.

- Amounts are integers in the smallest unit (1 token = 1e18 units)
- Supply is bounded by the uint256 range
- Holder keys are 160-bit, zero key is reserved
"""

# Monetary precision (1 token = 1e18 units)
DECIMALS: int = 18
UNIT: int = 10**DECIMALS

# Largest representable amount / supply
MAX_UINT256: int = 2**256 - 1

# Holder keys
ADDRESS_BYTES: int = 20
ADDRESS_HEX_LEN: int = ADDRESS_BYTES * 2
ZERO_ADDRESS: str = "0x" + "0" * ADDRESS_HEX_LEN
