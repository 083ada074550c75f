"""
Hashing for the event journal.

Payloads are hashed over their canonical JSON form. Events are chained:
each event hash covers the previous one, so rewriting any event breaks
every hash after it.
"""

import hashlib
import json
from datetime import datetime
from enum import Enum
from typing import Any

GENESIS = "GENESIS"


def _encode_extra(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"cannot hash value of type {type(value).__name__}")


def canonicalize_json(data: Any) -> str:
    """Sorted keys, no whitespace. Equal payloads give equal strings."""
    return json.dumps(data, sort_keys=True, separators=(",", ":"), default=_encode_extra)


def _sha256(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def hash_payload(payload: dict) -> str:
    return _sha256(canonicalize_json(payload))


def hash_ledger_event(
    seq: int,
    action: str,
    caller: str | None,
    employee_id: int | None,
    occurred_at: datetime,
    payload_hash: str,
    prev_hash: str | None,
) -> str:
    """
    Chained hash of one journal event.

    Covers every field of the event except the payload itself, which
    enters through ``payload_hash``.

    The first event of a journal links to ``GENESIS`` instead of a
    previous hash.
    """
    fields = (
        str(seq),
        action,
        caller or "",
        "" if employee_id is None else str(employee_id),
        occurred_at.isoformat(),
        payload_hash,
        prev_hash or GENESIS,
    )
    return _sha256("|".join(fields))
