"""Tests for card API endpoints."""

import asyncio

import pytest
from httpx import ASGITransport, AsyncClient

from ledgerdeck.main import app
from ledgerdeck.models.card import CardStatus
from ledgerdeck.services.record_codec import decode_index
from ledgerdeck.services.synchronizer import CollectionSynchronizer
from ledgerdeck.store.memory import InMemoryStore

OWNER = "0x1234567890abcdef1234567890abcdef12345678"


@pytest.fixture
async def client(synchronizer):
    """Async test client wired to the in-memory synchronizer."""
    app.state.synchronizer = synchronizer
    app.state.create_lock = asyncio.Lock()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    del app.state.synchronizer
    del app.state.create_lock


@pytest.fixture
async def seeded(store, synchronizer, make_record, seed):
    seed(
        store,
        make_record("1", 100, name="Dragon of Spirit", card_type="Creature"),
        make_record("2", 300, name="Wizard of Beast", card_type="Spell", status=CardStatus.IN_DECK),
        make_record("3", 200, name="Beast of Dragon", card_type="Artifact"),
    )
    await synchronizer.refresh()


class TestListCards:
    async def test_empty_collection(self, client: AsyncClient) -> None:
        response = await client.get("/cards")

        assert response.status_code == 200
        data = response.json()
        assert data["cards"] == []
        assert data["stats"]["total"] == 0
        assert data["stats"]["percentages"] == {"available": 0.0, "in-deck": 0.0, "in-game": 0.0}

    @pytest.mark.usefixtures("seeded")
    async def test_lists_newest_first(self, client: AsyncClient) -> None:
        response = await client.get("/cards")

        assert [c["id"] for c in response.json()["cards"]] == ["2", "3", "1"]

    @pytest.mark.usefixtures("seeded")
    async def test_filters_by_query_and_status(self, client: AsyncClient) -> None:
        response = await client.get("/cards", params={"q": "dragon", "status": "available"})

        data = response.json()
        assert [c["id"] for c in data["cards"]] == ["3", "1"]
        assert data["matches"] == 2
        assert data["stats"]["total"] == 3

    @pytest.mark.usefixtures("seeded")
    async def test_card_fields(self, client: AsyncClient) -> None:
        response = await client.get("/cards", params={"status": "in-deck"})

        card = response.json()["cards"][0]
        assert card["status"] == "in-deck"
        assert card["status_label"] == "in deck"
        assert card["owner_short"] == "0x1234...5678"

    async def test_invalid_status_rejected(self, client: AsyncClient) -> None:
        response = await client.get("/cards", params={"status": "burned"})

        assert response.status_code == 422


class TestStats:
    @pytest.mark.usefixtures("seeded")
    async def test_counts_and_percentages(self, client: AsyncClient) -> None:
        response = await client.get("/cards/stats")

        data = response.json()
        assert data["total"] == 3
        assert data["counts"] == {"available": 2, "in-deck": 1, "in-game": 0}
        assert sum(data["percentages"].values()) == pytest.approx(100.0)


class TestGetCard:
    @pytest.mark.usefixtures("seeded")
    async def test_found(self, client: AsyncClient) -> None:
        response = await client.get("/cards/3")

        assert response.status_code == 200
        assert response.json()["name"] == "Beast of Dragon"

    async def test_not_found(self, client: AsyncClient) -> None:
        response = await client.get("/cards/nope")

        assert response.status_code == 404


class TestCreateCard:
    async def test_create(self, client: AsyncClient, store) -> None:
        response = await client.post(
            "/cards",
            json={"name": "Dragon", "type": "Creature", "power": 5, "defense": 3, "owner": OWNER},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["card"]["status"] == "available"
        assert data["notification"]["status"] == "success"
        assert data["notification"]["visible_seconds"] == 2.0
        assert decode_index(store.entries["card_keys"]) == [data["card"]["id"]]

        listing = await client.get("/cards")
        assert [c["id"] for c in listing.json()["cards"]] == [data["card"]["id"]]

    async def test_requires_owner(self, client: AsyncClient, store) -> None:
        response = await client.post(
            "/cards",
            json={"name": "Dragon", "type": "Creature", "power": 5, "defense": 3, "owner": ""},
        )

        assert response.status_code == 400
        data = response.json()
        assert data["outcome"] == "known_failure"
        assert data["failure"]["kind"] == "invalid_input"
        assert "wallet" in data["failure"]["detail"].lower()
        assert data["notification"]["status"] == "error"
        assert data["notification"]["message"].startswith("Card creation failed")
        assert store.entries == {}

    async def test_negative_power_rejected(self, client: AsyncClient) -> None:
        response = await client.post(
            "/cards",
            json={"name": "Dragon", "type": "Creature", "power": -1, "defense": 3, "owner": OWNER},
        )

        assert response.status_code == 422

    async def test_unavailable_returns_envelope(self, client: AsyncClient, store) -> None:
        store.available = False

        response = await client.post(
            "/cards",
            json={"name": "Dragon", "type": "Creature", "power": 5, "defense": 3, "owner": OWNER},
        )

        assert response.status_code == 503
        data = response.json()
        assert data["outcome"] == "known_failure"
        assert data["failure"]["kind"] == "service_unavailable"
        assert data["notification"]["status"] == "error"
        assert data["notification"]["visible_seconds"] == 3.0
        assert data["notification"]["message"].startswith("Card creation failed")

    async def test_orphan_returns_envelope(self, client: AsyncClient, store) -> None:
        store.failing_writes.add("card_keys")

        response = await client.post(
            "/cards",
            json={"name": "Dragon", "type": "Creature", "power": 5, "defense": 3, "owner": OWNER},
        )

        assert response.status_code == 502
        assert response.json()["failure"]["kind"] == "orphaned_record"


class TestSampleCard:
    async def test_creates_random_card(self, client: AsyncClient) -> None:
        response = await client.post("/cards/sample", json={"owner": OWNER})

        assert response.status_code == 201
        card = response.json()["card"]
        assert card["owner"] == OWNER
        assert " of " in card["name"]
        assert 1 <= card["power"] <= 10
        assert card["payload"].startswith("FHE-ENCRYPTED-")

    async def test_requires_owner(self, client: AsyncClient) -> None:
        response = await client.post("/cards/sample", json={"owner": "  "})

        assert response.status_code == 400
        assert response.json()["failure"]["kind"] == "invalid_input"


class TestRefresh:
    async def test_refresh_reports_skips(self, client: AsyncClient, store, make_record, seed) -> None:
        seed(store, make_record("a"), make_record("b"))
        store.entries["card_b"] = b"broken"

        response = await client.post("/cards/refresh")

        assert response.status_code == 200
        data = response.json()
        assert data["stats"]["total"] == 1
        assert data["skipped"] == 1

    async def test_refresh_unavailable(self, client: AsyncClient, store) -> None:
        store.available = False

        response = await client.post("/cards/refresh")

        assert response.status_code == 503
        assert response.json()["notification"]["message"].startswith("Refresh failed")

    async def test_refresh_transport_error(self, client: AsyncClient, store) -> None:
        store.failing_reads.add("card_keys")

        response = await client.post("/cards/refresh")

        assert response.status_code == 502
        assert response.json()["failure"]["kind"] == "external_api_error"


class TestAvailability:
    async def test_available(self, client: AsyncClient) -> None:
        response = await client.get("/cards/availability")

        data = response.json()
        assert data["available"] is True
        assert data["notification"]["message"] == "Ledger is available"

    async def test_unavailable(self, client: AsyncClient, store) -> None:
        store.available = False

        response = await client.get("/cards/availability")

        assert response.json()["available"] is False

    async def test_availability_check_error(self, client: AsyncClient, store) -> None:
        store.check_error = True

        response = await client.get("/cards/availability")

        assert response.status_code == 502
        assert response.json()["notification"]["message"].startswith("Availability check failed")


class YieldingStore(InMemoryStore):
    """Reads give up the event loop, like any networked ledger would."""

    async def get(self, key: str) -> bytes:
        await asyncio.sleep(0)
        return await super().get(key)


class BrokenStore(InMemoryStore):
    async def get(self, key: str) -> bytes:
        raise RuntimeError("driver exploded")


class TestConcurrentCreates:
    async def test_both_ids_reach_the_index(self) -> None:
        store = YieldingStore()
        app.state.synchronizer = CollectionSynchronizer(
            store, index_key="card_keys", record_key_prefix="card_"
        )
        app.state.create_lock = asyncio.Lock()

        try:
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                first, second = await asyncio.gather(
                    client.post("/cards/sample", json={"owner": OWNER}),
                    client.post("/cards/sample", json={"owner": OWNER}),
                )
        finally:
            del app.state.synchronizer
            del app.state.create_lock

        assert first.status_code == second.status_code == 201
        ids = {first.json()["card"]["id"], second.json()["card"]["id"]}
        assert len(ids) == 2
        assert set(decode_index(store.entries["card_keys"])) == ids


class TestUnknownErrors:
    async def test_unclassified_error_returns_envelope(self) -> None:
        app.state.synchronizer = CollectionSynchronizer(
            BrokenStore(), index_key="card_keys", record_key_prefix="card_"
        )
        app.state.create_lock = asyncio.Lock()

        try:
            transport = ASGITransport(app=app, raise_app_exceptions=False)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                response = await client.post("/cards/refresh")
        finally:
            del app.state.synchronizer
            del app.state.create_lock

        assert response.status_code == 500
        data = response.json()
        assert data["outcome"] == "unknown_failure"
        assert data["failure"]["kind"] == "unknown"
        assert data["failure"]["detail"] == "RuntimeError"
        assert "driver exploded" not in response.text
        assert data["notification"]["status"] == "error"
        assert data["notification"]["message"].endswith("failed unexpectedly")
