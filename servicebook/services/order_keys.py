"""Order key allocation for ordered collections.

These functions compute the integer ``sort_order`` keys of a
collection. They are pure: no database access and no side effects,
which keeps them trivial to unit test. Only the relative order of keys
carries meaning; gaps left by deleted items are tolerated.
"""
from __future__ import annotations

from typing import Dict, Iterable, Sequence

from servicebook.errors import InvalidRequest


def next_order(existing_orders: Iterable[int], base: int = 0) -> int:
    """Return the order key for an item appended to a collection.

    Parameters
    ----------
    existing_orders: Iterable[int]
        The keys currently held by active items in the scope.
        ``None`` entries (soft-deleted rows) are ignored.
    base: int, default 0
        The key given to the first item of an empty collection.

    Returns
    -------
    int
        ``base`` when the collection is empty, otherwise one more than
        the current maximum (never less than ``base``).
    """
    orders = [order for order in existing_orders if order is not None]
    if not orders:
        return base
    return max(max(orders) + 1, base)


def resequence(ids: Sequence[str], base: int = 0) -> Dict[str, int]:
    """Assign contiguous keys ``base, base + 1, ...`` to ``ids`` in order.

    Raises ``InvalidRequest`` if an id appears more than once, since a
    single item cannot occupy two positions.
    """
    assignments: Dict[str, int] = {}
    for index, item_id in enumerate(ids):
        if item_id in assignments:
            raise InvalidRequest("Duplicate id in order list.", {"ids": [item_id]})
        assignments[item_id] = base + index
    return assignments
