"""Ordered collection service.

One generic service manages the display order of pricing parameters,
exclude parameters and extras; it is parameterised by the store for
the resource. All ordering rules live here: the store only persists
and the route handlers only check the shape of the request.

Reordering follows the *full resequence* discipline: a request lists
every active item of the owner's collection with its desired position.
Entries are sorted by the submitted ``sort_order`` and stored as
``base, base + 1, ...``, so the result is always unique and a repeated
request is idempotent. A list that does not match the stored set of
items was built from stale state and is rejected.

Without a ``version`` two concurrent reorders of the same collection
are last-writer-wins; clients that send the version they listed get a
``ConflictError`` instead.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, List, Optional

from servicebook.errors import Forbidden, InvalidRequest, NotFound
from servicebook.services.order_keys import next_order, resequence

logger = logging.getLogger(__name__)


class OrderedCollectionService:
    """Business rules for one ordered resource."""

    def __init__(self, store, base: int = 0) -> None:
        self.store = store
        self.base = base

    @property
    def resource(self) -> str:
        return self.store.resource

    # -- CRUD ----------------------------------------------------------------

    def list(self, owner_id: str, industry_id: Optional[str] = None) -> List:
        return self.store.list_by_owner(owner_id, industry_id=industry_id)

    def version(self, owner_id: str) -> int:
        return self.store.current_version(owner_id)

    def get(self, owner_id: str, item_id: str, include_deleted: bool = False):
        """Return one item of ``owner_id``.

        Raises ``NotFound`` for unknown ids and ``Forbidden`` when the
        item belongs to another owner.
        """
        item = self.store.get_by_id(item_id, include_deleted=include_deleted)
        if item is None:
            raise NotFound(f"{self.resource} {item_id} not found.", {"ids": [item_id]})
        if item.business_id != owner_id:
            raise Forbidden(f"{self.resource} {item_id} belongs to another business.", {"ids": [item_id]})
        return item

    def create(self, owner_id: str, payload: Mapping[str, Any]):
        """Create an item appended after the owner's last item."""
        sort_order = next_order(self.store.existing_orders(owner_id), base=self.base)
        return self.store.create(owner_id, dict(payload), sort_order)

    def update(self, owner_id: str, item_id: str, payload: Mapping[str, Any]):
        item = self.get(owner_id, item_id)
        return self.store.update(item, dict(payload))

    def delete(self, owner_id: str, item_id: str, permanent: bool = False) -> None:
        # a soft-deleted item can still be purged
        item = self.get(owner_id, item_id, include_deleted=permanent)
        self.store.delete(item, permanent=permanent)

    # -- reordering ------------------------------------------------------------

    def reorder(
        self,
        owner_id: str,
        updates: Sequence[Mapping[str, Any]],
        expected_version: Optional[int] = None,
    ) -> int:
        """Apply a full-resequence reorder request; return the new version.

        Every check runs before anything is written, in this order:
        shape, existence (``NotFound``), ownership (``Forbidden``),
        distinct ids and positions (``InvalidRequest``) and finally the
        full-list check against the stored collection (``InvalidRequest``).
        """
        entries = self._parse_updates(updates)
        ids = [item_id for item_id, _ in entries]

        found = {item.id: item for item in self.store.get_many(ids)}
        missing = sorted({item_id for item_id in ids if item_id not in found})
        if missing:
            raise NotFound(f"Unknown {self.resource}: {', '.join(missing)}.", {"ids": missing})

        foreign = sorted({item.id for item in found.values() if item.business_id != owner_id})
        if foreign:
            raise Forbidden(
                f"Cannot reorder {self.resource} of another business.",
                {"ids": foreign},
            )

        duplicate_ids = sorted({item_id for item_id in ids if ids.count(item_id) > 1})
        if duplicate_ids:
            raise InvalidRequest("Each id may appear only once.", {"ids": duplicate_ids})

        orders = [sort_order for _, sort_order in entries]
        duplicate_orders = sorted({order for order in orders if orders.count(order) > 1})
        if duplicate_orders:
            raise InvalidRequest(
                "Two items cannot share a position.",
                {"sort_orders": duplicate_orders},
            )

        active_ids = {item.id for item in self.store.list_by_owner(owner_id)}
        submitted = set(ids)
        if submitted != active_ids:
            raise InvalidRequest(
                f"The {self.resource} list is out of date; reload and try again.",
                {
                    "missing_ids": sorted(active_ids - submitted),
                    "unexpected_ids": sorted(submitted - active_ids),
                },
            )

        ordered_ids = [item_id for item_id, _ in sorted(entries, key=lambda entry: entry[1])]
        assignments = resequence(ordered_ids, base=self.base)
        logger.debug("Reordering %s for business %s: %s", self.resource, owner_id, ordered_ids)
        return self.store.apply_order_updates(owner_id, list(assignments.items()), expected_version)

    def _parse_updates(self, updates) -> List[tuple]:
        if isinstance(updates, (str, bytes)) or not isinstance(updates, Sequence):
            raise InvalidRequest("updates must be a list.")
        if not updates:
            raise InvalidRequest("updates must not be empty.")
        entries = []
        for index, update in enumerate(updates):
            if not isinstance(update, Mapping):
                raise InvalidRequest(f"updates[{index}] must be an object.")
            item_id = update.get("id")
            sort_order = update.get("sort_order")
            if not isinstance(item_id, str) or not item_id:
                raise InvalidRequest(f"updates[{index}] is missing an id.")
            if isinstance(sort_order, bool) or not isinstance(sort_order, int):
                raise InvalidRequest(f"updates[{index}].sortOrder must be an integer.")
            entries.append((item_id, sort_order))
        return entries
