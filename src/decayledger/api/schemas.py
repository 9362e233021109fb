from __future__ import annotations

"""Pydantic request/response schemas for the ledger API.

Amounts travel as decimal strings: uint256 values do not fit in a JSON
number without losing precision. Range checks (uint256, zero address, ...)
stay in the ledger so the HTTP and library surfaces reject the same inputs.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


def _parse_amount(v: object) -> int:
    if isinstance(v, bool):
        raise ValueError("amount must be a decimal string")
    if isinstance(v, int):
        return v
    s = str(v).strip()
    if not s or not s.isdigit():
        raise ValueError("amount must be a non-negative decimal string")
    return int(s)


class _AmountModel(BaseModel):
    amount: int = Field(..., description="Amount in smallest units, as a decimal string")

    @field_validator("amount", mode="before")
    @classmethod
    def _amount(cls, v: object) -> int:
        return _parse_amount(v)


class LedgerCreateRequest(BaseModel):
    ledger_id: str = Field(..., description="Registry id, e.g. 'main'")
    name: str = Field(..., min_length=1)
    symbol: str = Field(..., min_length=1)
    decay_rate: int = Field(..., description="Smallest units removed per second, as a decimal string")

    @field_validator("decay_rate", mode="before")
    @classmethod
    def _rate(cls, v: object) -> int:
        return _parse_amount(v)


class UpdateRequest(BaseModel):
    holder: str
    now: Optional[int] = Field(default=None, description="Seconds; defaults to the host clock")


class MoveRequest(_AmountModel):
    sender: str = Field(..., alias="from")
    to: str
    now: Optional[int] = None

    model_config = {"populate_by_name": True}


class CreateRequest(_AmountModel):
    to: str
    now: Optional[int] = None


class DestroyRequest(_AmountModel):
    holder: str
    now: Optional[int] = None


class ApproveRequest(_AmountModel):
    owner: str
    spender: str


class MoveFromRequest(_AmountModel):
    spender: str
    sender: str = Field(..., alias="from")
    to: str
    now: Optional[int] = None

    model_config = {"populate_by_name": True}
