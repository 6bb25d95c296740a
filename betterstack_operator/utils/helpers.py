"""Helper utility functions."""
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple


def object_key(namespace: str, name: str) -> str:
    """Build the ``namespace/name`` key for a namespaced object."""
    return f"{namespace}/{name}"


def split_key(key: str) -> Tuple[str, str]:
    """Split a ``namespace/name`` key. Keys without a namespace map to ``default``."""
    namespace, sep, name = key.partition("/")
    if not sep:
        return "default", namespace
    return namespace, name


def secret_index_key(namespace: str, secret_name: Optional[str]) -> Optional[str]:
    """Index key for a secret reference; None when no secret is referenced."""
    if not secret_name:
        return None
    return f"{namespace}/{secret_name}"


def create_merge_patch(base: Dict[str, Any], updated: Dict[str, Any]) -> Dict[str, Any]:
    """Compute an RFC 7386 merge patch turning ``base`` into ``updated``.

    Removed keys become ``None`` (null), nested dicts are diffed recursively,
    and any other changed value, lists included, is replaced wholesale.
    """
    patch: Dict[str, Any] = {}
    for key in base:
        if key not in updated:
            patch[key] = None
    for key, value in updated.items():
        old = base.get(key)
        if key in base and isinstance(old, dict) and isinstance(value, dict):
            nested = create_merge_patch(old, value)
            if nested:
                patch[key] = nested
        elif key not in base or old != value:
            patch[key] = value
    return patch


def utcnow() -> datetime:
    """Current time in UTC truncated to seconds, as Kubernetes stores timestamps."""
    return datetime.now(timezone.utc).replace(microsecond=0)
