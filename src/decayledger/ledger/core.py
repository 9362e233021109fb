# src/decayledger/ledger/core.py
from __future__ import annotations

"""Decaying ledger.

Every holder balance decays continuously at a fixed rate. Decay is applied
lazily: a HolderRecord stores the balance as of `last_updated`, and the live
balance is always a projection of that record to the current time.

Operations:
  - query(holder, now)            pure projection, never mutates
  - update(holder, now)           settle decay into storage
  - move(from, to, amount, now)   settle both holders, then transfer
  - create(to, amount, now)       settle recipient, then originate value
  - destroy(holder, amount, now)  settle holder, then remove value
  - approve / allowance / move_from
  - total_supply / settle_all / prune / snapshot

Atomicity:
  Each mutating call validates and computes its full effect first, then
  delivers notifications to the sink, then commits. Any failure (including a
  sink raising) leaves total_raw and every HolderRecord untouched.

Concurrency:
  One RLock per Ledger instance serializes every state access.
"""

import logging
import threading
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple

from decayledger.ledger.address import ZERO_ADDRESS, derive_ledger_address, is_zero, normalize_holder
from decayledger.ledger.clock import Clock, SystemClock
from decayledger.ledger.constants import DECIMALS, MAX_UINT256
from decayledger.ledger.decay import DecayModel, build_decay_model
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
from decayledger.ledger.events import Approved, EventSink, LedgerEvent, Moved, null_sink
from decayledger.ledger.invariants import ensure_invariants
from decayledger.log import log_event

Json = Dict[str, Any]


@dataclass
class HolderRecord:
    raw_amount: int = 0
    last_updated: int = 0


def _as_amount(v: Any, *, field: str = "amount") -> int:
    if isinstance(v, bool) or not isinstance(v, int):
        raise InvalidAmount(details={"field": field, "type": type(v).__name__})
    if v < 0 or v > MAX_UINT256:
        raise InvalidAmount(details={"field": field, "value": str(v)})
    return v


def _as_time(v: Any) -> int:
    if isinstance(v, bool) or not isinstance(v, int):
        raise InvalidTimestamp(details={"type": type(v).__name__})
    if v < 0:
        raise InvalidTimestamp(details={"now": v})
    return v


class Ledger:
    """A single decaying balance ledger."""

    decimals: int = DECIMALS

    def __init__(
        self,
        *,
        name: str,
        symbol: str,
        decay_rate: int,
        decay_model: Optional[DecayModel] = None,
        clock: Optional[Clock] = None,
        sink: Optional[EventSink] = None,
        address: Any = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._name = str(name)
        self._symbol = str(symbol)
        self._decay_rate = _as_amount(decay_rate, field="decay_rate")
        self._model = build_decay_model(self._decay_rate, decay_model)
        self._clock = clock or SystemClock()
        self._sink: EventSink = sink or null_sink
        self._address = normalize_holder(address) if address is not None else derive_ledger_address(self._name)
        if is_zero(self._address):
            raise InvalidHolder(reason="ledger_address_is_zero")
        self._logger = logger or logging.getLogger("decayledger.ledger")

        self._lock = threading.RLock()
        self._holders: Dict[str, HolderRecord] = {}
        self._allowances: Dict[Tuple[str, str], int] = {}
        self._total_raw = 0
        self._high_water = 0

    # ---- Introspection ----

    @property
    def name(self) -> str:
        return self._name

    @property
    def symbol(self) -> str:
        return self._symbol

    @property
    def decay_rate(self) -> int:
        return self._decay_rate

    @property
    def address(self) -> str:
        return self._address

    @property
    def total_raw(self) -> int:
        with self._lock:
            return self._total_raw

    @property
    def clock_high_water(self) -> int:
        with self._lock:
            return self._high_water

    def record(self, holder: Any) -> Optional[HolderRecord]:
        """Copy of the stored record for `holder` (None if never touched)."""
        h = normalize_holder(holder)
        with self._lock:
            rec = self._holders.get(h)
            return replace(rec) if rec is not None else None

    def holders(self) -> List[str]:
        with self._lock:
            return sorted(self._holders)

    # ---- Internals ----

    def _now(self, now: Any) -> int:
        # Callers hold self._lock: concurrent writers must read the clock in commit order.
        return _as_time(self._clock.now() if now is None else now)

    def _reject(self, op: str, err: LedgerError) -> LedgerError:
        log_event(
            self._logger,
            "ledger_rejected",
            ledger=self._name,
            op=op,
            code=err.code,
            reason=err.reason,
        )
        return err

    def _require_monotonic(self, op: str, now: int) -> None:
        if now < self._high_water:
            raise self._reject(
                op,
                InvalidTimestamp(reason="clock_regression", details={"now": now, "high_water": self._high_water}),
            )

    def _require_recipient(self, op: str, to: str) -> None:
        if is_zero(to) or to == self._address:
            raise self._reject(op, InvalidRecipient(details={"to": to}))

    def _require_sender(self, op: str, sender: str) -> None:
        if is_zero(sender):
            raise self._reject(op, InvalidSender(details={"from": sender}))

    def _project(self, holder: str, now: int) -> int:
        rec = self._holders.get(holder)
        if rec is None:
            return 0
        elapsed = now - rec.last_updated
        if elapsed <= 0:
            return rec.raw_amount
        return self._model.project(rec.raw_amount, elapsed)

    def _settle(self, holder: str, projection: int, now: int) -> HolderRecord:
        rec = self._holders.get(holder)
        if rec is None:
            rec = HolderRecord(raw_amount=0, last_updated=now)
            self._holders[holder] = rec
        self._total_raw += projection - rec.raw_amount
        rec.raw_amount = projection
        rec.last_updated = max(rec.last_updated, now)
        if now > self._high_water:
            self._high_water = now
        return rec

    def _emit(self, event: LedgerEvent) -> None:
        self._sink(event)

    def _plan_move(self, op: str, sender: str, to: str, amount: int, now: int) -> Tuple[int, int]:
        self._require_monotonic(op, now)
        from_bal = self._project(sender, now)
        if amount > from_bal:
            raise self._reject(
                op,
                InsufficientBalance(details={"from": sender, "balance": str(from_bal), "amount": str(amount)}),
            )
        to_bal = from_bal if to == sender else self._project(to, now)
        return from_bal, to_bal

    def _commit_move(self, sender: str, to: str, amount: int, from_bal: int, to_bal: int, now: int) -> None:
        src = self._settle(sender, from_bal, now)
        dst = self._settle(to, to_bal, now)
        if src is not dst:
            src.raw_amount -= amount
            dst.raw_amount += amount

    # ---- Reads ----

    def query(self, holder: Any, now: Any = None) -> int:
        """Live decayed balance of `holder` at `now`. Never mutates state."""
        h = normalize_holder(holder)
        with self._lock:
            t = self._now(now)
            return self._project(h, t)

    balance_of = query

    def total_supply(self, now: Any = None) -> int:
        """Live sum of every holder's decayed balance at `now`."""
        with self._lock:
            t = self._now(now)
            return sum(self._project(h, t) for h in self._holders)

    def allowance(self, owner: Any, spender: Any) -> int:
        o = normalize_holder(owner)
        s = normalize_holder(spender)
        with self._lock:
            return self._allowances.get((o, s), 0)

    # ---- Mutations ----

    def update(self, holder: Any, now: Any = None) -> int:
        """Bring `holder`'s stored record current. Returns the settled amount."""
        h = normalize_holder(holder)
        with self._lock:
            t = self._now(now)
            self._require_monotonic("update", t)
            before = self._holders[h].raw_amount if h in self._holders else 0
            projection = self._project(h, t)
            self._settle(h, projection, t)
            if projection != before:
                log_event(
                    self._logger,
                    "ledger_decayed",
                    level=logging.DEBUG,
                    ledger=self._name,
                    holder=h,
                    decayed=before - projection,
                    now=t,
                )
            return projection

    def move(self, sender: Any, to: Any, amount: Any, now: Any = None) -> bool:
        s = normalize_holder(sender)
        r = normalize_holder(to)
        amt = _as_amount(amount)
        self._require_sender("move", s)
        self._require_recipient("move", r)
        with self._lock:
            t = self._now(now)
            from_bal, to_bal = self._plan_move("move", s, r, amt, t)
            self._emit(Moved(sender=s, recipient=r, amount=amt))
            self._commit_move(s, r, amt, from_bal, to_bal, t)
        log_event(self._logger, "ledger_moved", ledger=self._name, sender=s, recipient=r, amount=amt, now=t)
        return True

    def create(self, to: Any, amount: Any, now: Any = None) -> bool:
        r = normalize_holder(to)
        amt = _as_amount(amount)
        self._require_recipient("create", r)
        with self._lock:
            t = self._now(now)
            self._require_monotonic("create", t)
            projection = self._project(r, t)
            current = self._holders[r].raw_amount if r in self._holders else 0
            settled_total = self._total_raw - (current - projection)
            if settled_total + amt > MAX_UINT256:
                raise self._reject(
                    "create",
                    Overflow(details={"total_raw": str(settled_total), "amount": str(amt)}),
                )
            self._emit(Moved(sender=ZERO_ADDRESS, recipient=r, amount=amt))
            rec = self._settle(r, projection, t)
            rec.raw_amount += amt
            self._total_raw += amt
        log_event(self._logger, "ledger_created", ledger=self._name, recipient=r, amount=amt, now=t)
        return True

    def destroy(self, holder: Any, amount: Any, now: Any = None) -> bool:
        h = normalize_holder(holder)
        amt = _as_amount(amount)
        self._require_sender("destroy", h)
        with self._lock:
            t = self._now(now)
            self._require_monotonic("destroy", t)
            bal = self._project(h, t)
            if amt > bal:
                raise self._reject(
                    "destroy",
                    InsufficientBalance(details={"from": h, "balance": str(bal), "amount": str(amt)}),
                )
            self._emit(Moved(sender=h, recipient=ZERO_ADDRESS, amount=amt))
            rec = self._settle(h, bal, t)
            rec.raw_amount -= amt
            self._total_raw -= amt
        log_event(self._logger, "ledger_destroyed", ledger=self._name, holder=h, amount=amt, now=t)
        return True

    def approve(self, owner: Any, spender: Any, amount: Any) -> bool:
        o = normalize_holder(owner)
        s = normalize_holder(spender)
        amt = _as_amount(amount)
        self._require_sender("approve", o)
        if is_zero(s):
            raise self._reject("approve", InvalidSpender(details={"spender": s}))
        with self._lock:
            self._emit(Approved(owner=o, spender=s, amount=amt))
            if amt:
                self._allowances[(o, s)] = amt
            else:
                self._allowances.pop((o, s), None)
        log_event(self._logger, "ledger_approved", ledger=self._name, owner=o, spender=s, amount=amt)
        return True

    def move_from(self, spender: Any, sender: Any, to: Any, amount: Any, now: Any = None) -> bool:
        """Move `amount` from `sender` to `to`, spending `spender`'s allowance.

        An allowance of MAX_UINT256 is treated as unlimited and never decremented.
        """
        sp = normalize_holder(spender)
        s = normalize_holder(sender)
        r = normalize_holder(to)
        amt = _as_amount(amount)
        self._require_sender("move_from", s)
        self._require_recipient("move_from", r)
        with self._lock:
            t = self._now(now)
            allowed = self._allowances.get((s, sp), 0)
            if amt > allowed:
                raise self._reject(
                    "move_from",
                    InsufficientAllowance(
                        details={"owner": s, "spender": sp, "allowance": str(allowed), "amount": str(amt)}
                    ),
                )
            from_bal, to_bal = self._plan_move("move_from", s, r, amt, t)
            self._emit(Moved(sender=s, recipient=r, amount=amt))
            if allowed != MAX_UINT256:
                remaining = allowed - amt
                if remaining:
                    self._allowances[(s, sp)] = remaining
                else:
                    self._allowances.pop((s, sp), None)
            self._commit_move(s, r, amt, from_bal, to_bal, t)
        log_event(
            self._logger,
            "ledger_moved",
            ledger=self._name,
            spender=sp,
            sender=s,
            recipient=r,
            amount=amt,
            now=t,
        )
        return True

    def settle_all(self, now: Any = None) -> int:
        """Update every holder at `now`. Afterwards total_raw == total_supply(now)."""
        with self._lock:
            t = self._now(now)
            self._require_monotonic("settle_all", t)
            for h in list(self._holders):
                self._settle(h, self._project(h, t), t)
            return self._total_raw

    def prune(self, now: Any = None) -> int:
        """Settle every holder and drop records that have decayed to zero."""
        with self._lock:
            t = self._now(now)
            self.settle_all(t)
            dead = [h for h, rec in self._holders.items() if rec.raw_amount == 0]
            for h in dead:
                del self._holders[h]
        if dead:
            log_event(self._logger, "ledger_pruned", ledger=self._name, removed=len(dead), now=t)
        return len(dead)

    # ---- Snapshot ----

    def snapshot(self) -> Json:
        """JSON-safe export of the full ledger state (amounts as decimal strings)."""
        with self._lock:
            allowances: Dict[str, Dict[str, str]] = {}
            for (o, s), amt in sorted(self._allowances.items()):
                allowances.setdefault(o, {})[s] = str(amt)
            return {
                "name": self._name,
                "symbol": self._symbol,
                "decimals": self.decimals,
                "decay_rate": str(self._decay_rate),
                "address": self._address,
                "total_raw": str(self._total_raw),
                "clock_high_water": self._high_water,
                "holders": {
                    h: {"raw_amount": str(rec.raw_amount), "last_updated": rec.last_updated}
                    for h, rec in sorted(self._holders.items())
                },
                "allowances": allowances,
            }

    @classmethod
    def from_snapshot(cls, snap: Json, **kwargs: Any) -> "Ledger":
        """Rebuild a ledger from snapshot(). Extra kwargs go to the constructor.

        Raises ValueError if the snapshot fails any check in ledger.invariants
        (total_raw == sum(raw_amount), ranges, last_updated <= clock_high_water).
        """
        if not isinstance(snap, dict):
            raise ValueError("ledger snapshot must be a dict")
        try:
            ensure_invariants(snap)
            ledger = cls(
                name=str(snap["name"]),
                symbol=str(snap["symbol"]),
                decay_rate=int(str(snap["decay_rate"])),
                address=snap.get("address"),
                **kwargs,
            )
            holders = snap.get("holders") or {}
            total = 0
            for h, rec in holders.items():
                raw = _as_amount(int(str(rec["raw_amount"])), field="raw_amount")
                last = _as_time(int(rec["last_updated"]))
                ledger._holders[normalize_holder(h)] = HolderRecord(raw_amount=raw, last_updated=last)
                total += raw
            for o, row in (snap.get("allowances") or {}).items():
                for s, amt in row.items():
                    ledger._allowances[(normalize_holder(o), normalize_holder(s))] = _as_amount(int(str(amt)))
            high_water = _as_time(int(snap.get("clock_high_water", 0)))
        except (AttributeError, KeyError, TypeError, ValueError, LedgerError) as e:
            raise ValueError(f"invalid ledger snapshot: {e}") from e

        ledger._total_raw = total
        ledger._high_water = high_water
        return ledger


__all__ = ["HolderRecord", "Ledger"]
