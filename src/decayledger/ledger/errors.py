# src/decayledger/ledger/errors.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

Json = Dict[str, Any]


@dataclass(eq=False)
class LedgerError(Exception):
    """Canonical error type for ledger operation failures.

    A LedgerError is raised before any state is committed, so the ledger is
    always left exactly as it was before the failing call.
    """

    code: str
    reason: str
    details: Optional[Json] = None

    def __str__(self) -> str:
        if self.details is None:
            return f"{self.code}:{self.reason}"
        return f"{self.code}:{self.reason}:{self.details}"


@dataclass(eq=False)
class InvalidRecipient(LedgerError):
    code: str = "invalid_recipient"
    reason: str = "recipient_not_allowed"
    details: Optional[Json] = None


@dataclass(eq=False)
class InvalidSender(LedgerError):
    code: str = "invalid_sender"
    reason: str = "sender_not_allowed"
    details: Optional[Json] = None


@dataclass(eq=False)
class InvalidSpender(LedgerError):
    code: str = "invalid_spender"
    reason: str = "spender_not_allowed"
    details: Optional[Json] = None


@dataclass(eq=False)
class InsufficientBalance(LedgerError):
    code: str = "insufficient_balance"
    reason: str = "amount_exceeds_balance"
    details: Optional[Json] = None


@dataclass(eq=False)
class InsufficientAllowance(LedgerError):
    code: str = "insufficient_allowance"
    reason: str = "amount_exceeds_allowance"
    details: Optional[Json] = None


@dataclass(eq=False)
class Overflow(LedgerError):
    code: str = "overflow"
    reason: str = "total_supply_overflow"
    details: Optional[Json] = None


@dataclass(eq=False)
class InvalidAmount(LedgerError):
    code: str = "invalid_amount"
    reason: str = "amount_must_be_uint256"
    details: Optional[Json] = None


@dataclass(eq=False)
class InvalidTimestamp(LedgerError):
    code: str = "invalid_timestamp"
    reason: str = "timestamp_must_be_non_negative_int"
    details: Optional[Json] = None


@dataclass(eq=False)
class InvalidHolder(LedgerError):
    code: str = "invalid_holder"
    reason: str = "holder_key_malformed"
    details: Optional[Json] = None
