"""
Shared route handlers for ordered collections.

``make_collection_blueprint`` builds the blueprint for one resource:
list, create, read, update and delete endpoints plus the bulk reorder
endpoint. The handlers only decode and shape-check the request; every
ordering rule is enforced by ``OrderedCollectionService``.

The caller's business is the JWT identity. Authorisation policy is
settled before a handler runs, so handlers trust it as the owner id.
"""

from __future__ import annotations

import logging
from typing import Callable

from flask import Blueprint, current_app, request
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError as SchemaValidationError

from ..errors import InvalidRequest, StorageError, invalid_from_schema
from ..schemas import ReorderRequestSchema
from ..services import OrderedCollectionService

logger = logging.getLogger(__name__)

TRUE_VALUES = {"1", "true", "yes"}


def _json_object() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidRequest("Request body must be a JSON object.")
    return data


def make_collection_blueprint(
    name: str,
    resource: str,
    store_factory: Callable,
    schema_cls,
    list_key: str,
    item_key: str,
) -> Blueprint:
    """Create the blueprint serving ``/<resource>`` for one ordered model.

    Parameters
    ----------
    name: str
        Blueprint name.
    resource: str
        URL segment, e.g. ``"pricing-parameters"``.
    store_factory: Callable
        Returns the store adapter for the resource.
    schema_cls:
        Marshmallow schema used to dump items and load payloads.
    list_key, item_key: str
        Envelope keys of list and single-item responses.
    """
    bp = Blueprint(name, __name__)

    def service() -> OrderedCollectionService:
        return OrderedCollectionService(store_factory(), base=current_app.config["ORDER_KEY_BASE"])

    @bp.route(f"/{resource}", methods=["GET"])
    @jwt_required()
    def list_items() -> tuple[dict, int]:
        """List the caller's items in display order.

        Accepts an optional ``industryId`` query parameter. The response
        carries the collection ``version`` to send back with a reorder.
        """
        svc = service()
        owner_id = get_jwt_identity()
        items = svc.list(owner_id, industry_id=request.args.get("industryId"))
        return {list_key: schema_cls(many=True).dump(items), "version": svc.version(owner_id)}, 200

    @bp.route(f"/{resource}", methods=["POST"])
    @jwt_required()
    def create_item() -> tuple[dict, int]:
        """Create an item; it is placed after the current last item."""
        try:
            payload = schema_cls().load(_json_object())
        except SchemaValidationError as err:
            raise invalid_from_schema(err) from err
        item = service().create(get_jwt_identity(), payload)
        return {item_key: schema_cls().dump(item)}, 201

    @bp.route(f"/{resource}/<item_id>", methods=["GET"])
    @jwt_required()
    def get_item(item_id: str) -> tuple[dict, int]:
        item = service().get(get_jwt_identity(), item_id)
        return {item_key: schema_cls().dump(item)}, 200

    @bp.route(f"/{resource}/<item_id>", methods=["PUT"])
    @jwt_required()
    def update_item(item_id: str) -> tuple[dict, int]:
        """Update payload fields. Position is changed only via reorder."""
        try:
            payload = schema_cls().load(_json_object(), partial=True)
        except SchemaValidationError as err:
            raise invalid_from_schema(err) from err
        item = service().update(get_jwt_identity(), item_id, payload)
        return {item_key: schema_cls().dump(item)}, 200

    @bp.route(f"/{resource}/<item_id>", methods=["DELETE"])
    @jwt_required()
    def delete_item(item_id: str) -> tuple[dict, int]:
        """Delete an item. ``?permanent=true`` removes the row for good."""
        permanent = request.args.get("permanent", "").lower() in TRUE_VALUES
        service().delete(get_jwt_identity(), item_id, permanent=permanent)
        return {"success": True}, 200

    @bp.route(f"/{resource}/reorder", methods=["POST"])
    @jwt_required()
    def reorder_items() -> tuple[dict, int]:
        """Replace the caller's display order.

        Expects ``{"updates": [{"id": ..., "sortOrder": ...}, ...]}``
        listing every item, and optionally the ``version`` returned by
        the list endpoint.
        """
        data = _json_object()
        if not isinstance(data.get("updates"), list):
            raise InvalidRequest("Updates array is required.")
        try:
            body = ReorderRequestSchema().load(data)
        except SchemaValidationError as err:
            raise invalid_from_schema(err) from err
        try:
            version = service().reorder(get_jwt_identity(), body["updates"], body.get("version"))
        except StorageError:
            logger.error("Error reordering %s for business %s", resource, get_jwt_identity())
            raise
        return {"success": True, "version": version}, 200

    return bp
