"""Shared helpers for dict <-> dataclass conversion of schema records."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping


def split_extras(data: Mapping[str, Any], known: Iterable[str]) -> Dict[str, Any]:
    """Return the keys of ``data`` that the record does not model."""
    known_set = set(known)
    return {key: value for key, value in data.items() if key not in known_set}


def compact(record: Dict[str, Any], extras: Mapping[str, Any]) -> Dict[str, Any]:
    """Drop absent (None) fields, then append preserved extra keys."""
    out = {key: value for key, value in record.items() if value is not None}
    for key, value in extras.items():
        out.setdefault(key, value)
    return out
