# tests/test_seed.py
from datetime import datetime
import pytest
import requests
from app import services
from app.models import ProductTransaction
from app.scheduler import reseed_job, start_scheduler
from app.config import SEED_FETCH_TRIES, SEED_URL
from app.errors import InvalidRecord, MalformedUpstreamPayload, UpstreamUnavailable
from conftest import make_record


def _parse(value):
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def test_seed_then_list_round_trip(store, upstream):
    dataset = [
        make_record(id=1, title="Fjallraven Backpack", price=329.85, category="men's clothing",
                    dateOfSale="2021-11-27T20:29:54+05:30", sold=False),
        make_record(id=2, title="Solid Gold Petite Micropave", price=168.0, category="jewelery",
                    dateOfSale="2022-03-01T00:00:00Z", sold=True),
    ]
    upstream.respond(dataset)
    assert services.seed_database(store) == 2
    assert upstream.calls == [SEED_URL]

    listed = [t.model_dump() for t in services.list_transactions(store)]
    assert len(listed) == len(dataset)
    for got, expected in zip(listed, dataset):
        for field in ("title", "description", "price", "category", "sold", "image"):
            assert got[field] == expected[field]
        assert got["dateOfSale"] == _parse(expected["dateOfSale"])


def test_seed_uses_given_url(store, upstream):
    upstream.respond([make_record()])
    services.seed_database(store, "http://example.test/dump.json")
    assert upstream.calls == ["http://example.test/dump.json"]


@pytest.mark.parametrize("payload", [{"data": []}, "not a list", None, ValueError("bad json")])
def test_non_array_payload_is_rejected(store, upstream, payload):
    upstream.respond(payload)
    with pytest.raises(MalformedUpstreamPayload):
        services.seed_database(store)


def test_invalid_record_rejects_batch_and_keeps_data(store, seed, upstream):
    seed({"title": "kept"})
    upstream.respond([make_record(), make_record(dateOfSale="not a date")])
    with pytest.raises(InvalidRecord):
        services.seed_database(store)
    assert [t.title for t in services.list_transactions(store)] == ["kept"]


def test_missing_field_rejects_batch(store, upstream):
    record = make_record()
    del record["image"]
    upstream.respond([record])
    with pytest.raises(InvalidRecord):
        services.seed_database(store)


def test_connection_errors_are_retried(store, upstream):
    upstream.fail(requests.ConnectionError("refused"))
    with pytest.raises(UpstreamUnavailable):
        services.seed_database(store)
    assert len(upstream.calls) == SEED_FETCH_TRIES


def test_http_error_is_not_retried(store, upstream):
    upstream.respond([], status_code=503)
    with pytest.raises(UpstreamUnavailable):
        services.seed_database(store)
    assert len(upstream.calls) == 1


def test_list_returns_null_for_missing_date(store, seed):
    seed({"title": "dated"})
    with store.session() as db:
        db.add(ProductTransaction(title="undated", description="d", price=1.0,
                                  category="c", date_of_sale=None, sold=True, image="i"))
        db.commit()
    listed = {t.title: t.dateOfSale for t in services.list_transactions(store)}
    assert listed["undated"] is None
    assert listed["dated"] is not None


def test_scheduled_reseed_logs_failures(store, seed, upstream):
    seed({"title": "kept"})
    upstream.respond("not a list")
    reseed_job(store)
    assert [t.title for t in services.list_transactions(store)] == ["kept"]


def test_start_scheduler_registers_reseed_job(store):
    scheduler = start_scheduler(store, hours=6)
    try:
        job = scheduler.get_job("reseed")
        assert job is not None
        assert job.args == (store,)
    finally:
        scheduler.shutdown(wait=False)


def test_list_returns_null_for_unparseable_stored_date(store, seed, raw_dated_row):
    seed({"title": "dated"})
    raw_dated_row("garbled", "not a date")
    listed = {t.title: t.dateOfSale for t in services.list_transactions(store)}
    assert listed["garbled"] is None
    assert listed["dated"] is not None
