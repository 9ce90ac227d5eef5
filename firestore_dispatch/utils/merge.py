from typing import Any, Dict, Optional


def deep_merge(base: Optional[Dict[str, Any]], update: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Recursively merge two dicts into a new one.

    Nested dicts are merged key by key; any other value in ``update``
    replaces the one in ``base``. Neither argument is mutated.
    """
    merged = dict(base or {})
    for key, value in (update or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged
