"""Tests for the FastAPI dependencies and error handlers."""

import re

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from lis.api import AllocatorDep, CounterStoreDep, get_counter_store, register_exception_handlers
from lis.services.identifiers.memory_store import InMemoryCounterStore
from tests.conftest import OutageStore


def create_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.post("/patients")
    async def create_patient(allocator: AllocatorDep) -> dict[str, str]:
        return {"patient_id": await allocator.generate_patient_id()}

    @app.post("/sequences/{name}/next")
    async def allocate(name: str, allocator: AllocatorDep) -> dict[str, str]:
        return {"id": await allocator.next_id(name)}

    @app.put("/sequences/{name}")
    async def advance(name: str, value: int, allocator: AllocatorDep) -> dict[str, int]:
        record = await allocator.advance(name, value)
        return {"value": record.value}

    @app.get("/counters")
    async def counters(store: CounterStoreDep) -> list[str]:
        return [record.name for record in await store.list_counters()]

    return app


@pytest.fixture
def store():
    return OutageStore()


@pytest.fixture
def client(store):
    app = create_app()
    app.dependency_overrides[get_counter_store] = lambda: store
    with TestClient(app) as client:
        yield client


class TestAllocation:
    def test_create_patient(self, client):
        first = client.post("/patients")
        second = client.post("/patients")

        assert first.status_code == 200
        assert re.fullmatch(r"PAT-\d{4}-000001", first.json()["patient_id"])
        assert second.json()["patient_id"].endswith("-000002")

    def test_shared_store_across_requests(self, client):
        client.post("/sequences/barcode/next")
        assert client.get("/counters").json() == ["barcode"]

    def test_store_dependency_is_cached(self):
        get_counter_store.cache_clear()
        try:
            assert get_counter_store() is get_counter_store()
        finally:
            get_counter_store.cache_clear()


class TestErrors:
    def test_store_outage_returns_503(self, client, store):
        store.down = True

        response = client.post("/patients")

        assert response.status_code == 503
        assert response.json() == {"detail": "Identifier allocation is temporarily unavailable"}

    def test_unknown_sequence_returns_400(self, client):
        response = client.post("/sequences/invoiceNumber/next")

        assert response.status_code == 400
        assert "invoiceNumber" in response.json()["detail"]

    def test_regression_returns_400(self, client):
        assert client.put("/sequences/orderNumber", params={"value": 50}).json() == {"value": 50}

        response = client.put("/sequences/orderNumber", params={"value": 10})

        assert response.status_code == 400
        assert "refusing" in response.json()["detail"]

    def test_override_with_plain_memory_store(self):
        app = create_app()
        app.dependency_overrides[get_counter_store] = lambda: InMemoryCounterStore({"testCode": 42})
        with TestClient(app) as client:
            assert client.post("/sequences/testCode/next").json() == {"id": "TST-0042"}
