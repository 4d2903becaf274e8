"""Decoding of ``eksp-list.sh`` output into domain models.

``eksp-list.sh`` prints either a JSON array of cluster identifiers (no
arguments) or a single JSON object describing one cluster (one
identifier argument).  Object keys are matched case-insensitively and
missing or ``null`` fields fall back to their zero values, so scripts
may emit ``numworkers`` or ``numWorkers`` alike.

Every failure surfaces as :class:`~eksphemeral.exceptions.DecodeError`;
callers decide whether that means "not found" or "no data".
"""

from __future__ import annotations

import json
from types import MappingProxyType
from typing import Any

from eksphemeral.core.models import ClusterRecord
from eksphemeral.exceptions import DecodeError

_STRING_FIELDS: dict[str, str] = {
    "id": "id",
    "name": "name",
    "kubeversion": "kube_version",
    "owner": "owner",
    "created": "created_at",
}
_INT_FIELDS: dict[str, str] = {
    "numworkers": "num_workers",
    "timeout": "timeout_minutes",
    "ttl": "ttl_minutes",
}


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError as exc:
        raise DecodeError(f"invalid JSON: {exc}", text=text) from exc


# ---------------------------------------------------------------------------
# Single record
# ---------------------------------------------------------------------------

def parse_cluster_record(text: str) -> ClusterRecord:
    """Decode one cluster object into a :class:`ClusterRecord`.

    A top-level ``null`` decodes to the empty record, which renders as
    the "does not exist" sentinel.

    Raises
    ------
    DecodeError
        If *text* is not valid JSON, is not an object, or a field has
        the wrong type.
    """
    payload = _loads(text)
    if payload is None:
        return ClusterRecord()
    if not isinstance(payload, dict):
        raise DecodeError(
            f"expected a JSON object, got {type(payload).__name__}", text=text,
        )

    values: dict[str, Any] = {}
    for key, value in payload.items():
        lowered = key.lower()
        if value is None:
            continue
        if lowered in _STRING_FIELDS:
            values[_STRING_FIELDS[lowered]] = _as_str(key, value, text)
        elif lowered in _INT_FIELDS:
            values[_INT_FIELDS[lowered]] = _as_int(key, value, text)
        elif lowered == "details":
            values["details"] = _as_details(value, text)
    return ClusterRecord(**values)


def _as_str(key: str, value: object, text: str) -> str:
    if not isinstance(value, str):
        raise DecodeError(f"field {key!r} must be a string", text=text)
    return value


def _as_int(key: str, value: object, text: str) -> int:
    # bool is an int subclass; JSON true/false is never a count.
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"field {key!r} must be an integer", text=text)
    return value


def _as_details(value: object, text: str) -> MappingProxyType[str, str]:
    if not isinstance(value, dict):
        raise DecodeError("field 'details' must be an object", text=text)
    details: dict[str, str] = {}
    for key, item in value.items():
        if item is None:
            details[key] = ""
        elif isinstance(item, str):
            details[key] = item
        else:
            raise DecodeError(f"detail {key!r} must be a string", text=text)
    return MappingProxyType(details)


# ---------------------------------------------------------------------------
# Identifier list
# ---------------------------------------------------------------------------

def parse_cluster_ids(text: str) -> tuple[str, ...]:
    """Decode a JSON array of cluster identifiers, preserving order.

    ``[]`` (and a top-level ``null``) is a valid, empty result — distinct
    from a decode failure.  ``null`` elements decode to ``""``.

    Raises
    ------
    DecodeError
        If *text* is not valid JSON, is not an array, or contains
        anything other than strings and ``null``.
    """
    payload = _loads(text)
    if payload is None:
        return ()
    if not isinstance(payload, list):
        raise DecodeError(
            f"expected a JSON array, got {type(payload).__name__}", text=text,
        )
    ids: list[str] = []
    for item in payload:
        if item is None:
            ids.append("")
        elif isinstance(item, str):
            ids.append(item)
        else:
            raise DecodeError("cluster identifiers must be strings", text=text)
    return tuple(ids)
