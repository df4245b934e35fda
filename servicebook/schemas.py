"""
Serialization schemas using Marshmallow for ServiceBook.

The resource schemas convert the ordered models to JSON and validate
create/update payloads. Ownership, order keys and timestamps are
dump-only: callers never set them directly, and unknown keys are
dropped. The reorder schemas validate only the *shape* of a reorder
request; semantic checks live in the ordered collection service.
"""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate, pre_load, post_load
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema, auto_field

from .models import PricingParameter, ExcludeParameter, Extra
from .util.sanitization import strip_tags


PARAMETER_DISPLAY_CHOICES = (
    "Customer Frontend, Backend & Admin",
    "Customer Backend & Admin",
    "Admin Only",
)
EXTRA_DISPLAY_CHOICES = ("frontend-backend-admin", "backend-admin", "admin-only")

READ_ONLY_FIELDS = ("id", "business_id", "sort_order", "created_at", "updated_at")


class OrderedItemFields:
    """Fields shared by every ordered resource schema.

    Mixed into each ``SQLAlchemyAutoSchema`` so the ``auto_field``
    declarations resolve against that schema's own model.
    """

    industry_id = auto_field(validate=validate.Length(min=1, max=64))
    name = auto_field(validate=validate.Length(min=1, max=100))
    description = auto_field(validate=validate.Length(max=255), allow_none=True)
    price = auto_field(validate=validate.Range(min=0))
    time_minutes = auto_field(validate=validate.Range(min=0))

    @post_load
    def clean_text(self, data: dict, **kwargs) -> dict:
        for key in ("name", "description"):
            if data.get(key):
                data[key] = strip_tags(data[key])
        return data


class PricingParameterSchema(OrderedItemFields, SQLAlchemyAutoSchema):
    """Schema for ``PricingParameter`` objects."""

    variable_category = auto_field(validate=validate.Length(min=1, max=100))
    display = auto_field(validate=validate.OneOf(PARAMETER_DISPLAY_CHOICES))

    class Meta:
        model = PricingParameter
        unknown = EXCLUDE
        dump_only = READ_ONLY_FIELDS
        exclude = ("deleted_at",)


class ExcludeParameterSchema(OrderedItemFields, SQLAlchemyAutoSchema):
    """Schema for ``ExcludeParameter`` objects."""

    display = auto_field(validate=validate.OneOf(PARAMETER_DISPLAY_CHOICES))

    class Meta:
        model = ExcludeParameter
        unknown = EXCLUDE
        dump_only = READ_ONLY_FIELDS
        exclude = ("deleted_at",)


class ExtraSchema(OrderedItemFields, SQLAlchemyAutoSchema):
    """Schema for ``Extra`` objects."""

    display = auto_field(validate=validate.OneOf(EXTRA_DISPLAY_CHOICES))
    service_checklists = fields.List(fields.String(validate=validate.Length(min=1)))
    excluded_providers = fields.List(fields.String(validate=validate.Length(min=1)))

    class Meta:
        model = Extra
        unknown = EXCLUDE
        dump_only = READ_ONLY_FIELDS
        exclude = ("deleted_at",)


class OrderUpdateSchema(Schema):
    """One ``{id, sortOrder}`` entry of a reorder request."""

    id = fields.String(required=True, validate=validate.Length(min=1))
    sort_order = fields.Integer(required=True, strict=True, data_key="sortOrder")

    class Meta:
        unknown = EXCLUDE

    @pre_load
    def accept_snake_case(self, data, **kwargs):
        # older admin clients send ``sort_order``
        if isinstance(data, dict) and "sortOrder" not in data and "sort_order" in data:
            data = dict(data)
            data["sortOrder"] = data.pop("sort_order")
        return data


class ReorderRequestSchema(Schema):
    """Body of ``POST /{resource}/reorder``."""

    updates = fields.List(fields.Nested(OrderUpdateSchema), required=True)
    version = fields.Integer(strict=True, allow_none=True, validate=validate.Range(min=0))

    class Meta:
        unknown = EXCLUDE
