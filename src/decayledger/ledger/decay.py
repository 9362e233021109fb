# src/decayledger/ledger/decay.py
from __future__ import annotations

"""Decay projection models.

The ledger never reads a balance without first projecting it through a
DecayModel. LinearDecay is the immutable baseline: a fixed number of
smallest units removed per elapsed second, saturating at zero.

Richer models (half-life, schedules, ...) can be injected, but the ledger
always wraps them in FlooredDecay so the effective projection is never above
the baseline linear projection, i.e. decay is never slower than the
configured rate.
"""

from dataclasses import dataclass
from typing import Protocol


class DecayModel(Protocol):
    def project(self, raw: int, elapsed: int) -> int: ...


@dataclass(frozen=True)
class LinearDecay:
    """max(0, raw - rate * elapsed)."""

    rate: int

    def __post_init__(self) -> None:
        if isinstance(self.rate, bool) or not isinstance(self.rate, int) or self.rate < 0:
            raise ValueError(f"decay rate must be a non-negative int (got {self.rate!r})")

    def project(self, raw: int, elapsed: int) -> int:
        if elapsed <= 0:
            return raw
        decay = self.rate * elapsed
        if decay >= raw:
            return 0
        return raw - decay


@dataclass(frozen=True)
class HalfLifeDecay:
    """Halve the balance every `half_life` seconds.

    Within a period the value falls linearly toward the next halving, so
    partial periods decay too and frequent settling does not skip decay.
    """

    half_life: int

    def __post_init__(self) -> None:
        if isinstance(self.half_life, bool) or not isinstance(self.half_life, int) or self.half_life <= 0:
            raise ValueError(f"half_life must be a positive int (got {self.half_life!r})")

    def project(self, raw: int, elapsed: int) -> int:
        if elapsed <= 0:
            return raw
        periods, rem = divmod(elapsed, self.half_life)
        if periods >= raw.bit_length():
            return 0
        hi = raw >> periods
        lo = hi >> 1
        return hi - (hi - lo) * rem // self.half_life


@dataclass(frozen=True)
class FlooredDecay:
    """Apply `model`, but never project above `baseline`."""

    model: DecayModel
    baseline: LinearDecay

    def project(self, raw: int, elapsed: int) -> int:
        base = self.baseline.project(raw, elapsed)
        ext = int(self.model.project(raw, elapsed))
        if ext < 0:
            ext = 0
        return min(base, ext)


def build_decay_model(rate: int, extension: DecayModel | None = None) -> DecayModel:
    """Return the projection the ledger uses for a given baseline rate."""
    baseline = LinearDecay(rate)
    if extension is None:
        return baseline
    return FlooredDecay(model=extension, baseline=baseline)


__all__ = ["DecayModel", "FlooredDecay", "HalfLifeDecay", "LinearDecay", "build_decay_model"]
