"""Seed script for demo data.

Running this script populates the database with a demo business that
has a few pricing parameters, exclude parameters and extras, created
through the ordered collection service so each gets an order key. It
can be executed with ``python -m seed.seed`` from the repository root.
"""
from __future__ import annotations

from flask_jwt_extended import create_access_token

from servicebook import create_app, db
from servicebook.services import OrderedCollectionService
from servicebook.stores import ExcludeParameterStore, ExtraStore, PricingParameterStore

DEMO_BUSINESS = "demo-business"
DEMO_INDUSTRY = "home-cleaning"


def run_seeds() -> None:
    """Insert demo collections for ``DEMO_BUSINESS`` and print a token."""
    app = create_app()
    with app.app_context():
        db.create_all()
        base = app.config["ORDER_KEY_BASE"]

        parameters = OrderedCollectionService(PricingParameterStore(), base=base)
        for name, price in (("Bedrooms", 20.0), ("Bathrooms", 15.0), ("Square Feet", 0.1)):
            parameters.create(
                DEMO_BUSINESS,
                {"industry_id": DEMO_INDUSTRY, "name": name, "price": price, "variable_category": name},
            )

        excludes = OrderedCollectionService(ExcludeParameterStore(), base=base)
        for name in ("No Kitchen", "No Bathrooms"):
            excludes.create(DEMO_BUSINESS, {"industry_id": DEMO_INDUSTRY, "name": name, "price": 0.0})

        extras = OrderedCollectionService(ExtraStore(), base=base)
        for name, price in (("Inside Fridge", 30.0), ("Inside Oven", 25.0), ("Windows", 40.0)):
            extras.create(
                DEMO_BUSINESS,
                {"industry_id": DEMO_INDUSTRY, "name": name, "price": price, "qty_based": name == "Windows"},
            )

        token = create_access_token(identity=DEMO_BUSINESS)
        print("Seed data inserted successfully.")
        print(f"Bearer token for {DEMO_BUSINESS}: {token}")


if __name__ == "__main__":
    run_seeds()
