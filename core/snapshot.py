"""Copy-on-write helpers for property snapshots.

Snapshots are never mutated in place. Callers take a deep copy with
`copy_snapshot` and apply the routed set/delete helpers to that copy only.
"""

from __future__ import annotations

from collections.abc import Mapping
import copy
from datetime import datetime
from typing import Any

from core.models import PropertySnapshot
from core.namespaces import EXIF_DATETIME_FMT, FieldRoute, Namespace


def copy_snapshot(snapshot: Mapping[str, Any] | None) -> PropertySnapshot:
    """Return a deep, plain-dict copy of `snapshot`."""
    if not snapshot:
        return {}
    return {str(key): copy.deepcopy(value) for key, value in snapshot.items()}


def get_namespace(snapshot: Mapping[str, Any], namespace: Namespace) -> dict[str, Any]:
    """Return the namespace dict stored in `snapshot`, or an empty dict."""
    value = snapshot.get(namespace.value)
    return value if isinstance(value, dict) else {}


def format_exif_datetime(value: datetime) -> str:
    """Format as EXIF local wall time; aware values are converted to local time first."""
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.strftime(EXIF_DATETIME_FMT)


def parse_exif_datetime(value: Any) -> datetime | None:
    """Parse `YYYY:MM:DD HH:MM:SS`; return None when the value is not such a string."""
    if not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value.strip(), EXIF_DATETIME_FMT)
    except ValueError:
        return None


def set_routed(snapshot: PropertySnapshot, rt: FieldRoute, value: Any) -> None:
    """Write `value` under `rt` (paired keys and mirrors included) into `snapshot`."""
    if rt.namespace is Namespace.TOP_LEVEL:
        snapshot[rt.key] = value
        return
    ns = snapshot.setdefault(rt.namespace.value, {})
    if not isinstance(ns, dict):
        ns = snapshot[rt.namespace.value] = {}
    for key in (rt.key, *rt.paired_keys):
        ns[key] = value
    for mirror_ns, mirror_key in rt.mirrors:
        target = snapshot.setdefault(mirror_ns.value, {})
        if not isinstance(target, dict):
            target = snapshot[mirror_ns.value] = {}
        target[mirror_key] = value


def _discard(snapshot: PropertySnapshot, namespace: Namespace, keys: tuple[str, ...]) -> None:
    ns = snapshot.get(namespace.value)
    if not isinstance(ns, dict):
        return
    for key in keys:
        ns.pop(key, None)
    # An emptied namespace is dropped instead of being written as {}
    if not ns:
        del snapshot[namespace.value]


def delete_routed(snapshot: PropertySnapshot, rt: FieldRoute) -> None:
    """Remove the keys addressed by `rt` from `snapshot`; missing keys are ignored.

    Mirrors in other namespaces are left in place.
    """
    if rt.namespace is Namespace.TOP_LEVEL:
        snapshot.pop(rt.key, None)
        return
    _discard(snapshot, rt.namespace, (rt.key, *rt.paired_keys))
