# tests/conftest.py
import pytest
import requests
from fastapi.testclient import TestClient
from sqlalchemy import text
from app import crud, services
from app.db import RecordStore
from app.main import create_app
from app.schemas import TransactionIn


def make_record(**overrides):
    record = {
        "title": "Mens Casual Slim Fit",
        "description": "The color could be slightly different between on the screen and in practice.",
        "price": 45.0,
        "category": "men's clothing",
        "dateOfSale": "2022-03-15T10:00:00+00:00",
        "sold": True,
        "image": "https://fakestoreapi.com/img/71YXzeOuslL._AC_UY879_.jpg",
    }
    record.update(overrides)
    return record


class ExplodingStore:
    """Stands in for a store that must not be touched."""

    def session(self):
        raise AssertionError("record store was accessed")


@pytest.fixture
def store(tmp_path):
    store = RecordStore(f"sqlite:///{tmp_path / 'test.db'}")
    store.open()
    yield store
    store.close()


@pytest.fixture
def seed(store):
    def _seed(*records):
        with store.session() as db:
            return crud.replace_all(db, [TransactionIn.model_validate(make_record(**r)) for r in records])
    return _seed


@pytest.fixture
def client(store):
    app = create_app(store=store, seed_on_startup=False, seed_interval_hours=0)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def exploding_store():
    return ExplodingStore()


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeUpstream:
    def __init__(self):
        self.calls = []
        self.response = FakeResponse([])

    def respond(self, payload, status_code=200):
        self.response = FakeResponse(payload, status_code)

    def fail(self, exc):
        self.response = exc

    def get(self, url, timeout=None):
        self.calls.append(url)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


@pytest.fixture
def upstream(monkeypatch):
    fake = FakeUpstream()
    monkeypatch.setattr(services.requests, "get", fake.get)
    monkeypatch.setattr("app.utils.time.sleep", lambda seconds: None)
    return fake


@pytest.fixture
def raw_dated_row(store):
    """Insert a row whose stored date bypasses validation."""
    def _insert(title, date_of_sale, price=10.0, sold=True):
        with store.session() as db:
            db.execute(
                text("INSERT INTO product_transactions (title, description, price, category, date_of_sale, sold, image) "
                     "VALUES (:title, 'd', :price, 'legacy', :date_of_sale, :sold, 'i')"),
                {"title": title, "price": price, "date_of_sale": date_of_sale, "sold": sold},
            )
            db.commit()
    return _insert
