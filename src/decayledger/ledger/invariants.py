# src/decayledger/ledger/invariants.py
from __future__ import annotations

"""Ledger invariant checks.

These operate on a ledger snapshot (see Ledger.snapshot()) so they can be run
against any exported state, not only a live Ledger.

Checked:
  - total_raw equals the sum of every holder's raw_amount
  - every raw_amount and allowance is within [0, 2**256 - 1]
  - no record is stamped later than the clock high-water mark
"""

from typing import Any, Dict, List

from decayledger.ledger.constants import MAX_UINT256

Json = Dict[str, Any]


def _as_int(v: Any) -> int:
    return int(str(v))


def invariant_violations(snap: Json) -> List[str]:
    """Return a list of human-readable violations (empty when healthy)."""
    if not isinstance(snap, dict):
        raise TypeError(f"snapshot must be dict, got {type(snap)}")

    out: List[str] = []
    holders = snap.get("holders") or {}
    high_water = _as_int(snap.get("clock_high_water", 0))

    total = 0
    for h, rec in holders.items():
        raw = _as_int(rec.get("raw_amount", 0))
        if raw < 0 or raw > MAX_UINT256:
            out.append(f"holder {h}: raw_amount out of range ({raw})")
        last = _as_int(rec.get("last_updated", 0))
        if last > high_water:
            out.append(f"holder {h}: last_updated {last} > clock high-water {high_water}")
        total += raw

    declared = _as_int(snap.get("total_raw", 0))
    if declared != total:
        out.append(f"total_raw {declared} != sum of raw_amount {total}")
    if declared > MAX_UINT256:
        out.append(f"total_raw exceeds uint256 ({declared})")

    for owner, row in (snap.get("allowances") or {}).items():
        for spender, amt in row.items():
            a = _as_int(amt)
            if a < 0 or a > MAX_UINT256:
                out.append(f"allowance {owner}->{spender} out of range ({a})")

    return out


def ensure_invariants(snap: Json) -> Json:
    """Raise ValueError if the snapshot violates any invariant; return it otherwise."""
    problems = invariant_violations(snap)
    if problems:
        raise ValueError("ledger invariant violated: " + "; ".join(problems))
    return snap


__all__ = ["ensure_invariants", "invariant_violations"]
