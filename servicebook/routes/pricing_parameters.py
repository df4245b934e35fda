"""
Routes for a business's pricing parameters.

Pricing parameters are the priced variables of a service (bedrooms,
bathrooms, square footage). Their display order on the booking form
is managed through ``POST /pricing-parameters/reorder``.
"""

from __future__ import annotations

from ..schemas import PricingParameterSchema
from ..stores import PricingParameterStore
from .collections import make_collection_blueprint


pricing_parameters_bp = make_collection_blueprint(
    "pricing_parameters",
    "pricing-parameters",
    PricingParameterStore,
    PricingParameterSchema,
    list_key="pricingParameters",
    item_key="pricingParameter",
)
