"""Small list helpers shared by traits."""

from __future__ import annotations

__all__ = ["add_sorted_unique", "add_unique"]


def add_unique(items: list[str], value: str) -> list[str]:
    """Append *value* to *items* unless an equal string is already present.

    The list is modified in place and returned for convenience. Ordering is
    left to the caller.
    """
    if value not in items:
        items.append(value)
    return items


def add_sorted_unique(items: list[str], value: str) -> list[str]:
    """Unique-add *value* then sort the whole list ascending, in place."""
    add_unique(items, value)
    items.sort()
    return items
