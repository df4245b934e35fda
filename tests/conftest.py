"""Shared pytest fixtures.

Every test gets a fresh application bound to an in-memory SQLite
database, a test client and a helper issuing JWTs for a business.
"""
from __future__ import annotations

import pytest
from flask_jwt_extended import create_access_token

from servicebook import create_app, db
from servicebook.services import OrderedCollectionService
from servicebook.stores import ExtraStore, PricingParameterStore


@pytest.fixture()
def app():
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite://",
            "JWT_SECRET_KEY": "test-secret-key-that-is-long-enough-for-hs256",
        }
    )
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def auth_headers(app):
    def make(business_id: str) -> dict:
        token = create_access_token(identity=business_id)
        return {"Authorization": f"Bearer {token}"}

    return make


@pytest.fixture()
def parameters(app) -> OrderedCollectionService:
    return OrderedCollectionService(PricingParameterStore())


@pytest.fixture()
def extras(app) -> OrderedCollectionService:
    return OrderedCollectionService(ExtraStore())


def parameter_payload(name: str, industry_id: str = "cleaning") -> dict:
    return {"industry_id": industry_id, "name": name, "variable_category": name, "price": 10.0}


@pytest.fixture()
def abc(parameters):
    """Pricing parameters A(0), B(1), C(2) of business ``biz-1``."""
    return [parameters.create("biz-1", parameter_payload(name)).id for name in ("A", "B", "C")]
