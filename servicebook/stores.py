"""Store adapters for the ordered resources.

Each store is a thin persistence layer over one SQLAlchemy model: it
fetches, creates, updates and deletes rows and performs the atomic
batch write used by reordering. It contains no business rules and no
validation; that lives in ``services.ordered_collection``. Every read
goes to the database, there is no caching.

Every public write commits exactly once. Any ``SQLAlchemyError`` rolls
the session back and is re-raised as ``StorageError`` so a failed call
never leaves a partial change behind.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Set, Tuple

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from .db import db
from .errors import ConflictError, StorageError
from .models import ExcludeParameter, Extra, OrderScope, PricingParameter
from .services.soft_delete_service import soft_delete_item

logger = logging.getLogger(__name__)


class OrderedItemStore:
    """Persistence for one ordered resource.

    Subclasses bind ``model``; the resource name used for the version
    counter is taken from the model.
    """

    model = None

    @property
    def resource(self) -> str:
        return self.model.resource

    # -- reads -------------------------------------------------------------

    def get_by_id(self, item_id: str, include_deleted: bool = False):
        """Return the item with ``item_id`` or ``None``.

        Soft-deleted items are treated as absent unless
        ``include_deleted`` is set.
        """
        item = db.session.get(self.model, item_id)
        if item is None or (item.deleted_at is not None and not include_deleted):
            return None
        return item

    def get_many(self, item_ids: Iterable[str]) -> List:
        """Return the active items among ``item_ids`` (any owner)."""
        ids = list(item_ids)
        if not ids:
            return []
        return (
            self.model.query.filter(self.model.id.in_(ids), self.model.deleted_at.is_(None))
            .all()
        )

    def list_by_owner(self, owner_id: str, industry_id: Optional[str] = None) -> List:
        """List active items of ``owner_id`` in ascending display order."""
        query = self.model.query.filter_by(business_id=owner_id, deleted_at=None)
        if industry_id:
            query = query.filter_by(industry_id=industry_id)
        return query.order_by(
            self.model.sort_order.asc(),
            self.model.created_at.asc(),
            self.model.id.asc(),
        ).all()

    def existing_orders(self, owner_id: str) -> Set[int]:
        rows = (
            db.session.query(self.model.sort_order)
            .filter(self.model.business_id == owner_id, self.model.deleted_at.is_(None))
            .all()
        )
        return {row[0] for row in rows if row[0] is not None}

    def current_version(self, owner_id: str) -> int:
        scope = OrderScope.query.filter_by(business_id=owner_id, resource=self.resource).first()
        return scope.version if scope else 0

    # -- writes ------------------------------------------------------------

    def create(self, owner_id: str, payload: dict, sort_order: int):
        """Insert a new item at ``sort_order`` and bump the scope version."""
        item = self.model(business_id=owner_id, sort_order=sort_order, **payload)
        try:
            db.session.add(item)
            self._bump_version(owner_id)
            db.session.commit()
        except SQLAlchemyError as e:
            self._fail("create", owner_id, e)
        logger.info("Created %s %s for business %s at order %s", self.resource, item.id, owner_id, sort_order)
        return item

    def update(self, item, payload: dict):
        """Apply payload fields to ``item``. Order keys are never touched here."""
        try:
            for key, value in payload.items():
                setattr(item, key, value)
            db.session.commit()
        except SQLAlchemyError as e:
            self._fail("update", item.business_id, e)
        return item

    def delete(self, item, permanent: bool = False) -> None:
        """Remove ``item``; survivors keep their keys (gaps are fine)."""
        owner_id, item_id = item.business_id, item.id
        try:
            if permanent:
                db.session.delete(item)
            else:
                soft_delete_item(item)
            self._bump_version(owner_id)
            db.session.commit()
        except SQLAlchemyError as e:
            self._fail("delete", owner_id, e)
        logger.info("Deleted %s %s (permanent=%s)", self.resource, item_id, permanent)

    def apply_order_updates(
        self,
        owner_id: str,
        updates: Iterable[Tuple[str, int]],
        expected_version: Optional[int] = None,
    ) -> int:
        """Write every ``(id, sort_order)`` pair in a single transaction.

        Either every listed item receives its new key or none does.
        When ``expected_version`` is given the scope version is
        compared-and-swapped in the same transaction and a mismatch
        raises ``ConflictError``, as does a listed item that is no longer
        active. Returns the new scope version.
        """
        pairs = list(updates)
        table = self.model.__table__
        try:
            version = self._bump_version(owner_id, expected_version)
            # Two-phase write: park every row on a negative key first so the
            # unique (business_id, sort_order) constraint never sees two rows
            # on the same key while the batch is half applied. Only active
            # rows are written; a soft-deleted row must keep a NULL key.
            active = (table.c.business_id == owner_id) & table.c.deleted_at.is_(None)
            for index, (item_id, _) in enumerate(pairs):
                result = db.session.execute(
                    update(table)
                    .where(table.c.id == item_id, active)
                    .values(sort_order=-(index + 1))
                )
                if result.rowcount != 1:
                    raise ConflictError(
                        f"{self.resource} {item_id} was deleted or moved; reload and try again.",
                        {"ids": [item_id]},
                    )
            for item_id, sort_order in pairs:
                db.session.execute(
                    update(table)
                    .where(table.c.id == item_id, active)
                    .values(sort_order=sort_order)
                )
            db.session.commit()
        except ConflictError:
            db.session.rollback()
            raise
        except SQLAlchemyError as e:
            self._fail("reorder", owner_id, e)
        logger.info(
            "Reordered %d %s for business %s (version %s)",
            len(pairs),
            self.resource,
            owner_id,
            version,
        )
        return version

    # -- helpers -----------------------------------------------------------

    def _bump_version(self, owner_id: str, expected_version: Optional[int] = None) -> int:
        """Increment the scope version inside the current transaction."""
        scope = OrderScope.query.filter_by(business_id=owner_id, resource=self.resource).first()
        if scope is None:
            scope = OrderScope(business_id=owner_id, resource=self.resource, version=0)
            db.session.add(scope)
            db.session.flush()
        stmt = update(OrderScope).where(OrderScope.id == scope.id)
        if expected_version is not None:
            stmt = stmt.where(OrderScope.version == expected_version)
        result = db.session.execute(
            stmt.values(version=OrderScope.version + 1).execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            current = self.current_version(owner_id)
            raise ConflictError(
                f"The {self.resource} order was changed by someone else.",
                {"expected_version": expected_version, "current_version": current},
            )
        db.session.expire(scope)
        return scope.version

    def _fail(self, action: str, owner_id: str, error: SQLAlchemyError) -> None:
        db.session.rollback()
        logger.error(
            "Storage failure during %s of %s for business %s: %s",
            action,
            self.resource,
            owner_id,
            error,
        )
        raise StorageError(f"Failed to {action} {self.resource}.") from error


class PricingParameterStore(OrderedItemStore):
    model = PricingParameter


class ExcludeParameterStore(OrderedItemStore):
    model = ExcludeParameter


class ExtraStore(OrderedItemStore):
    model = Extra
