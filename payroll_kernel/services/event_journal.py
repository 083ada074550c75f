"""
EventJournal -- append-only, hash-chained record of ledger mutations.

Responsibility:
    Keeps an in-memory trail of every successful PayrollLedger mutation
    (registrations, removals, owner edits, claims, withdrawals, deposits)
    and lets auditors verify that the trail has not been altered.

Architecture position:
    Kernel > Services. Written to only by PayrollLedger, after all guards
    have passed and the state change has been applied.

Invariants enforced:
    - Append-only: events are frozen and never removed.
    - Strictly monotonic ``seq`` starting at 1.
    - Each event's ``hash`` covers its payload hash and the previous
      event's hash (genesis uses ``"GENESIS"``).

Failure modes:
    - AuditChainBrokenError from ``verify_chain()`` when any stored event
      no longer matches its recorded hashes.

Audit relevance:
    Failed operations never append, so the journal replays to exactly the
    ledger's current state.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from payroll_kernel.domain.clock import Clock, SystemClock
from payroll_kernel.exceptions import AuditChainBrokenError
from payroll_kernel.logging_config import get_logger
from payroll_kernel.utils.hashing import GENESIS, hash_ledger_event, hash_payload

logger = get_logger("services.event_journal")


class LedgerAction(str, Enum):
    """Kinds of ledger mutation recorded in the journal."""

    EMPLOYEE_ADDED = "employee_added"
    EMPLOYEE_REMOVED = "employee_removed"
    SALARY_CHANGED = "salary_changed"
    PAYDAY_CHANGED = "payday_changed"
    ACCOUNT_REBOUND = "account_rebound"
    PAY_CLAIMED = "pay_claimed"
    FUNDS_WITHDRAWN = "funds_withdrawn"
    FUNDS_DEPOSITED = "funds_deposited"


@dataclass(frozen=True)
class LedgerEvent:
    """One journal entry."""

    seq: int
    action: LedgerAction
    caller: str
    employee_id: int | None
    occurred_at: datetime
    payload: dict[str, Any] = field(default_factory=dict)
    payload_hash: str = ""
    prev_hash: str | None = None
    hash: str = ""


class EventJournal:
    """
    In-memory append-only journal.

    Usage:
        journal = EventJournal(clock=DeterministicClock())
        ledger = PayrollLedger(owner, journal=journal)
        ...
        journal.verify_chain()
    """

    def __init__(self, clock: Clock | None = None):
        self._clock = clock or SystemClock()
        self._events: list[LedgerEvent] = []
        self._lock = threading.Lock()

    def append(
        self,
        action: LedgerAction,
        caller: str,
        employee_id: int | None,
        payload: dict[str, Any],
    ) -> LedgerEvent:
        """Record one mutation and return the stored event."""
        with self._lock:
            seq = len(self._events) + 1
            prev_hash = self._events[-1].hash if self._events else None
            payload_hash = hash_payload(payload)
            occurred_at = self._clock.now()
            event = LedgerEvent(
                seq=seq,
                action=action,
                caller=caller,
                employee_id=employee_id,
                occurred_at=occurred_at,
                payload=dict(payload),
                payload_hash=payload_hash,
                prev_hash=prev_hash,
                hash=hash_ledger_event(
                    seq,
                    action.value,
                    caller,
                    employee_id,
                    occurred_at,
                    payload_hash,
                    prev_hash,
                ),
            )
            self._events.append(event)

        logger.debug(
            "journal_event_appended",
            extra={"seq": seq, "action": action.value},
        )
        return event

    def events(self) -> list[LedgerEvent]:
        """All events in append order."""
        with self._lock:
            return list(self._events)

    def events_for(self, employee_id: int) -> list[LedgerEvent]:
        """Events that touched ``employee_id``, in append order."""
        with self._lock:
            return [e for e in self._events if e.employee_id == employee_id]

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    @property
    def head_hash(self) -> str | None:
        """Hash of the newest event, or None for an empty journal."""
        with self._lock:
            return self._events[-1].hash if self._events else None

    def verify_chain(self) -> bool:
        """
        Recompute every hash and link.

        Returns:
            True when the chain is intact.

        Raises:
            AuditChainBrokenError: at the first event that does not match.
        """
        prev_hash: str | None = None
        for expected_seq, event in enumerate(self.events(), start=1):
            payload_hash = hash_payload(event.payload)
            if event.seq != expected_seq or event.prev_hash != prev_hash:
                raise AuditChainBrokenError(
                    event.seq, prev_hash or GENESIS, event.prev_hash or GENESIS
                )
            if payload_hash != event.payload_hash:
                raise AuditChainBrokenError(
                    event.seq, payload_hash, event.payload_hash
                )
            expected = hash_ledger_event(
                event.seq,
                event.action.value,
                event.caller,
                event.employee_id,
                event.occurred_at,
                payload_hash,
                prev_hash,
            )
            if expected != event.hash:
                raise AuditChainBrokenError(event.seq, expected, event.hash)
            prev_hash = event.hash
        return True
