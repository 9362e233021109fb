from __future__ import annotations

from decayledger.ledger.address import ZERO_ADDRESS, normalize_holder
from decayledger.ledger.clock import Clock, ManualClock, SystemClock
from decayledger.ledger.constants import DECIMALS, MAX_UINT256, UNIT
from decayledger.ledger.core import HolderRecord, Ledger
from decayledger.ledger.decay import DecayModel, FlooredDecay, HalfLifeDecay, LinearDecay
from decayledger.ledger.errors import (
    InsufficientAllowance,
    InsufficientBalance,
    InvalidAmount,
    InvalidHolder,
    InvalidRecipient,
    InvalidSender,
    InvalidSpender,
    InvalidTimestamp,
    LedgerError,
    Overflow,
)
from decayledger.ledger.events import Approved, FanoutSink, LoggingEventSink, MemoryEventSink, Moved

__all__ = [
    "Approved",
    "Clock",
    "DECIMALS",
    "DecayModel",
    "FanoutSink",
    "FlooredDecay",
    "HalfLifeDecay",
    "HolderRecord",
    "InsufficientAllowance",
    "InsufficientBalance",
    "InvalidAmount",
    "InvalidHolder",
    "InvalidRecipient",
    "InvalidSender",
    "InvalidSpender",
    "InvalidTimestamp",
    "Ledger",
    "LedgerError",
    "LinearDecay",
    "LoggingEventSink",
    "MAX_UINT256",
    "ManualClock",
    "MemoryEventSink",
    "Moved",
    "Overflow",
    "SystemClock",
    "UNIT",
    "ZERO_ADDRESS",
    "normalize_holder",
]
