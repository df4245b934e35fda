"""
Routes for a business's exclude parameters.

Exclude parameters let a customer leave part of a service out (for
example "no kitchen"). Their order is independent of the pricing
parameters' order.
"""

from __future__ import annotations

from ..schemas import ExcludeParameterSchema
from ..stores import ExcludeParameterStore
from .collections import make_collection_blueprint


exclude_parameters_bp = make_collection_blueprint(
    "exclude_parameters",
    "exclude-parameters",
    ExcludeParameterStore,
    ExcludeParameterSchema,
    list_key="excludeParameters",
    item_key="excludeParameter",
)
