"""Layering of config dicts read from several sources."""

from __future__ import annotations

from functools import reduce
from typing import Any


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return ``base`` updated with ``override``, section by section.

    Sections (``watch:``, ``logging:``) present on both sides are merged key
    by key; any other value in ``override`` replaces the base value, except
    None, which leaves it unset so env overrides can be partial.
    """
    merged = dict(base)
    for key, value in override.items():
        if value is None:
            continue
        current = merged.get(key)
        merged[key] = (
            deep_merge(current, value)
            if isinstance(current, dict) and isinstance(value, dict)
            else value
        )
    return merged


def merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
    """Merge config layers, lowest priority first."""
    return reduce(deep_merge, (c for c in configs if c), {})
