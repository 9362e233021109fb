# src/decayledger/ledger/address.py
from __future__ import annotations

"""Holder key normalization.

Holder keys are opaque 160-bit identifiers. The canonical form is a lowercase,
0x-prefixed, 40-hex-digit string so keys compare equal regardless of how the
caller spelled them. ZERO_ADDRESS is reserved: it means "no holder" and is
the sender of every origination event.
"""

import hashlib
import re
from typing import Any

from decayledger.ledger.constants import ADDRESS_BYTES, ADDRESS_HEX_LEN, ZERO_ADDRESS
from decayledger.ledger.errors import InvalidHolder

_HEX_RE = re.compile(r"^[0-9a-f]{%d}$" % ADDRESS_HEX_LEN)


def normalize_holder(v: Any) -> str:
    """Return the canonical form of a holder key.

    Accepts:
      - "0x..." / "0X..." / bare hex strings of 40 hex digits (any case)
      - 20-byte bytes / bytearray
      - non-negative ints below 2**160

    Raises InvalidHolder for anything else.
    """
    if isinstance(v, bool):
        raise InvalidHolder(details={"holder": repr(v)})

    if isinstance(v, (bytes, bytearray)):
        if len(v) != ADDRESS_BYTES:
            raise InvalidHolder(details={"holder": bytes(v).hex(), "len": len(v)})
        return "0x" + bytes(v).hex()

    if isinstance(v, int):
        if v < 0 or v >= 2 ** (ADDRESS_BYTES * 8):
            raise InvalidHolder(details={"holder": str(v)})
        return "0x" + format(v, "0%dx" % ADDRESS_HEX_LEN)

    if isinstance(v, str):
        s = v.strip().lower()
        if s.startswith("0x"):
            s = s[2:]
        if not _HEX_RE.match(s):
            raise InvalidHolder(details={"holder": v})
        return "0x" + s

    raise InvalidHolder(details={"holder_type": type(v).__name__})


def is_zero(holder: str) -> bool:
    return holder == ZERO_ADDRESS


def derive_ledger_address(seed: str) -> str:
    """Deterministic self-identifier for a ledger, derived from a seed string."""
    digest = hashlib.sha256(("decayledger:" + str(seed)).encode("utf-8")).digest()
    return "0x" + digest[-ADDRESS_BYTES:].hex()


__all__ = ["ZERO_ADDRESS", "derive_ledger_address", "is_zero", "normalize_holder"]
