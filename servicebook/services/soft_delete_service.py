"""Soft delete utilities.

To preserve historical data (old bookings reference the pricing
parameters and extras they were priced with), ordered items are not
removed from the database by default. Instead a ``deleted_at``
timestamp is set. Queries that should only return active records must
filter ``deleted_at IS NULL``.

A soft-deleted item also gives up its position: its ``sort_order`` is
cleared so the unique ``(business_id, sort_order)`` constraint only
ever applies to active items. Survivors are not renumbered.
"""
from __future__ import annotations

from datetime import datetime

from servicebook.db import db


def soft_delete_item(item) -> None:
    """Mark an ordered item as deleted and release its order key.

    Changes are flushed to the database session but not committed,
    allowing the caller to decide when to commit.
    """
    item.deleted_at = datetime.utcnow()
    item.sort_order = None
    db.session.flush()
