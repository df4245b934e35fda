"""
Database models for the ServiceBook ordered collections.

Three resources keep a user-controlled display order per business:
pricing parameters, exclude parameters and add-on extras. They share
the ``OrderedItemMixin`` columns (owner, order key, soft delete and
timestamps) and add their own payload fields. Each table carries a
unique constraint on ``(business_id, sort_order)``; soft-deleted rows
have their ``sort_order`` cleared so they never hold a position.

``OrderScope`` stores one version counter per business and resource.
It is bumped by every change to a collection's membership or order and
lets a reorder request detect that it was built from a stale view.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import declared_attr

from . import db


def _new_id() -> str:
    return str(uuid.uuid4())


class OrderedItemMixin:
    """Columns shared by every ordered resource."""

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    business_id = db.Column(db.String(64), nullable=False, index=True)
    industry_id = db.Column(db.String(64), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(255))
    price = db.Column(db.Float, nullable=False, default=0.0)
    time_minutes = db.Column(db.Integer, nullable=False, default=0)
    service_category = db.Column(db.String(100))
    # NULL only for soft-deleted rows
    sort_order = db.Column(db.Integer, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    # Soft delete timestamp; when set, this record is considered deleted
    deleted_at = db.Column(db.DateTime, nullable=True)

    @declared_attr
    def __table_args__(cls):
        return (
            db.UniqueConstraint("business_id", "sort_order", name=f"uix_{cls.__tablename__}_business_order"),
        )

    @property
    def is_active(self) -> bool:
        return self.deleted_at is None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id} business={self.business_id} order={self.sort_order}>"


class PricingParameter(OrderedItemMixin, db.Model):
    __allow_unmapped__ = True
    """A priced variable (bedrooms, square footage, ...) offered by a business."""
    __tablename__ = "pricing_parameters"

    resource = "pricing-parameters"

    variable_category: str = db.Column(db.String(100), nullable=False)
    display: str = db.Column(db.String(50), nullable=False, default="Customer Frontend, Backend & Admin")
    frequency: Optional[str] = db.Column(db.String(100))
    is_default: bool = db.Column(db.Boolean, nullable=False, default=False)


class ExcludeParameter(OrderedItemMixin, db.Model):
    __allow_unmapped__ = True
    """Something a customer can exclude from a service (e.g. "no kitchen")."""
    __tablename__ = "exclude_parameters"

    resource = "exclude-parameters"

    icon: Optional[str] = db.Column(db.String(100))
    display: str = db.Column(db.String(50), nullable=False, default="Customer Frontend, Backend & Admin")
    frequency: Optional[str] = db.Column(db.String(100))


class Extra(OrderedItemMixin, db.Model):
    __allow_unmapped__ = True
    """An add-on a customer can book on top of a service."""
    __tablename__ = "extras"

    resource = "extras"

    display: str = db.Column(db.String(50), nullable=False, default="frontend-backend-admin")
    qty_based: bool = db.Column(db.Boolean, nullable=False, default=False)
    exempt_from_discount: bool = db.Column(db.Boolean, nullable=False, default=False)
    # ids of checklists / providers, stored as JSON arrays
    service_checklists: List[str] = db.Column(db.JSON, nullable=False, default=list)
    excluded_providers: List[str] = db.Column(db.JSON, nullable=False, default=list)
    show_based_on_frequency: bool = db.Column(db.Boolean, nullable=False, default=False)
    show_based_on_service_category: bool = db.Column(db.Boolean, nullable=False, default=False)
    show_based_on_variables: bool = db.Column(db.Boolean, nullable=False, default=False)


class OrderScope(db.Model):
    __allow_unmapped__ = True
    """Version counter for one ``(business_id, resource)`` order space."""
    __tablename__ = "order_scopes"

    id: int = db.Column(db.Integer, primary_key=True)
    business_id: str = db.Column(db.String(64), nullable=False)
    resource: str = db.Column(db.String(50), nullable=False)
    version: int = db.Column(db.Integer, nullable=False, default=0)

    __table_args__ = (
        db.UniqueConstraint("business_id", "resource", name="uix_order_scope"),
    )

    def __repr__(self) -> str:
        return f"<OrderScope {self.business_id} {self.resource} v{self.version}>"
