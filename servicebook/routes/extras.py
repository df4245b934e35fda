"""Routes for add-on extras offered on top of a booked service."""

from __future__ import annotations

from ..schemas import ExtraSchema
from ..stores import ExtraStore
from .collections import make_collection_blueprint


extras_bp = make_collection_blueprint(
    "extras",
    "extras",
    ExtraStore,
    ExtraSchema,
    list_key="extras",
    item_key="extra",
)
