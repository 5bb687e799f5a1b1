import os

# Settings are read at import time; point them at an in-memory database first.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from ecofinds.database import engine
from ecofinds.main import app
from ecofinds.models.product import ProductImage

PASSWORD = "Passw0rd!"

PRODUCT_FIELDS = {
    "title": "Vintage lamp",
    "category": "FURNITURE",
    "description": "Brass desk lamp, works fine",
    "price": 25.5,
    "quantity": 3,
    "condition": "Good",
    "workingCondition": "Fully working",
}


@pytest.fixture(autouse=True)
def db():
    SQLModel.metadata.create_all(engine)
    yield
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def session():
    with Session(engine) as s:
        yield s


@pytest.fixture
def register(client):
    """Sign up a user; returns (auth headers, user id)."""

    def _register(email: str = "seller@example.com", display_name: str = "Seller"):
        resp = client.post(
            "/api/auth/signup",
            json={"displayName": display_name, "email": email, "password": PASSWORD},
        )
        assert resp.status_code == 201, resp.text
        data = resp.json()["data"]
        return {"Authorization": f"Bearer {data['token']}"}, data["user"]["id"]

    return _register


@pytest.fixture
def make_product(client):
    """Create a product through the API; returns its JSON."""

    def _make_product(headers: dict, **overrides):
        resp = client.post("/api/products", json={**PRODUCT_FIELDS, **overrides}, headers=headers)
        assert resp.status_code == 201, resp.text
        return resp.json()["data"]

    return _make_product


@pytest.fixture
def add_image(session):
    def _add_image(product_id: int, url: str, is_primary: bool = False) -> ProductImage:
        image = ProductImage(product_id=product_id, url=url, is_primary=is_primary)
        session.add(image)
        session.commit()
        session.refresh(image)
        return image

    return _add_image
