"""
Tasklane Backend — HTTP Route Tests
=====================================

What:  End-to-end tests of the HTTP surface against an in-memory database.
How:   HTTPX AsyncClient over ASGITransport; each test gets a fresh app and
       database. Lifespan does not run under ASGITransport, so tests seed
       the default board themselves.

What we test:
    ✅ Status codes: 200 reads, 204 mutations, 404 missing, 422 malformed
    ✅ Error body shape and X-Request-ID propagation
    ✅ camelCase wire format, no storage-internal fields
    ✅ Column order assignment and delete cascade through the API
    ✅ Admin routes are absent unless enabled
    ✅ Rate limiting returns 429 with Retry-After; the default budget fits editing
    ✅ Unexpected errors return 500 with the request ID
    ✅ Health check
"""

from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.config import settings
from app.database import engine
from app.main import create_app
from app.services.board_service import board_service


@pytest_asyncio.fixture
async def default_board(session_factory):
    async with session_factory() as session:
        await board_service.seed(session)
        await session.commit()


async def _board(client, board_id: str = "1") -> dict:
    response = await client.get(f"/api/boards/{board_id}")
    assert response.status_code == 200
    return response.json()


async def _add_column(client, name: str, board_id: str = "1") -> dict:
    response = await client.post("/api/columns", json={"boardId": board_id, "name": name})
    assert response.status_code == 204
    board = await _board(client, board_id)
    return next(c for c in board["columns"] if c["name"] == name)


class TestBoardRoutes:

    @pytest.mark.asyncio
    async def test_list_boards_empty(self, test_client):
        response = await test_client.get("/api/boards")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_default_board_view(self, test_client, default_board):
        response = await test_client.get("/api/boards")

        assert response.status_code == 200
        assert response.json() == [{
            "id": "1",
            "name": "1st Board",
            "color": "#e0e0e0",
            "columns": [],
            "items": [],
        }]

    @pytest.mark.asyncio
    async def test_missing_board_is_404(self, test_client):
        response = await test_client.get(
            "/api/boards/nope", headers={"X-Request-ID": "req-123"}
        )

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "not_found"
        assert body["message"] == "missing board nope"
        assert body["details"] == {"resource": "board", "resource_id": "nope"}
        assert body["request_id"] == "req-123"
        assert response.headers["X-Request-ID"] == "req-123"

    @pytest.mark.asyncio
    async def test_request_id_generated_when_absent(self, test_client):
        response = await test_client.get("/api/boards")

        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_patch_board_name_only(self, test_client, default_board):
        response = await test_client.patch("/api/boards", json={"id": "1", "name": "X"})

        assert response.status_code == 204
        assert response.content == b""
        board = await _board(test_client)
        assert (board["name"], board["color"]) == ("X", "#e0e0e0")

    @pytest.mark.asyncio
    async def test_patch_missing_board(self, test_client):
        response = await test_client.patch("/api/boards", json={"id": "9", "color": "#000"})

        assert response.status_code == 404


class TestColumnRoutes:

    @pytest.mark.asyncio
    async def test_create_assigns_consecutive_orders(self, test_client, default_board):
        todo = await _add_column(test_client, "Todo")
        done = await _add_column(test_client, "Done")

        assert (todo["order"], done["order"]) == (1, 2)
        assert todo["boardId"] == "1"
        assert todo["id"] != done["id"]
        assert set(todo) == {"id", "boardId", "name", "order"}

    @pytest.mark.asyncio
    async def test_create_on_missing_board(self, test_client):
        response = await test_client.post("/api/columns", json={"boardId": "9", "name": "Todo"})

        assert response.status_code == 404
        assert response.json()["message"] == "missing board 9"

    @pytest.mark.asyncio
    async def test_malformed_body_is_422(self, test_client, default_board):
        response = await test_client.post("/api/columns", json={"boardId": "1"})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_snake_case_keys_are_accepted(self, test_client, default_board):
        response = await test_client.post("/api/columns", json={"board_id": "1", "name": "Todo"})

        assert response.status_code == 204

    @pytest.mark.asyncio
    async def test_patch_order_only(self, test_client, default_board):
        column = await _add_column(test_client, "Todo")

        response = await test_client.patch(
            "/api/columns", json={"id": column["id"], "boardId": "1", "order": 3}
        )

        assert response.status_code == 204
        board = await _board(test_client)
        assert [(c["name"], c["order"]) for c in board["columns"]] == [("Todo", 3)]

    @pytest.mark.asyncio
    async def test_delete_cascades_to_items(self, test_client, default_board):
        column = await _add_column(test_client, "c1")
        for n in (1, 2):
            response = await test_client.post("/api/items", json={
                "id": f"i{n}", "title": f"Card {n}", "order": n,
                "columnId": column["id"], "boardId": "1",
            })
            assert response.status_code == 204

        response = await test_client.delete(f"/api/boards/1/columns/{column['id']}")

        assert response.status_code == 204
        board = await _board(test_client)
        assert board["columns"] == []
        assert board["items"] == []

    @pytest.mark.asyncio
    async def test_delete_missing_column(self, test_client, default_board):
        response = await test_client.delete("/api/boards/1/columns/ghost")

        assert response.status_code == 404
        assert response.json()["message"] == "missing column ghost"


class TestItemRoutes:

    ITEM = {"id": "i1", "title": "Write docs", "order": 1, "columnId": "c1", "boardId": "1"}

    @pytest.mark.asyncio
    async def test_round_trip_without_content(self, test_client, default_board):
        response = await test_client.post("/api/items", json=self.ITEM)

        assert response.status_code == 204
        board = await _board(test_client)
        assert board["items"] == [self.ITEM]

    @pytest.mark.asyncio
    async def test_round_trip_with_content(self, test_client, default_board):
        item = {**self.ITEM, "content": "Describe every route"}

        await test_client.post("/api/items", json=item)

        board = await _board(test_client)
        assert board["items"] == [item]

    @pytest.mark.asyncio
    async def test_put_replaces_and_clears_content(self, test_client, default_board):
        await test_client.post("/api/items", json={**self.ITEM, "content": "old"})

        replacement = {**self.ITEM, "title": "Moved", "columnId": "c2", "order": 4}
        response = await test_client.put("/api/items", json=replacement)

        assert response.status_code == 204
        board = await _board(test_client)
        assert board["items"] == [replacement]

    @pytest.mark.asyncio
    async def test_put_missing_item(self, test_client, default_board):
        response = await test_client.put("/api/items", json=self.ITEM)

        assert response.status_code == 404
        assert response.json()["message"] == "missing item i1"

    @pytest.mark.asyncio
    async def test_duplicate_id_is_500(self, test_client, default_board):
        await test_client.post("/api/items", json=self.ITEM)

        response = await test_client.post("/api/items", json=self.ITEM)

        assert response.status_code == 500
        assert response.json()["error"] == "server_error"

    @pytest.mark.asyncio
    async def test_empty_id_is_422(self, test_client, default_board):
        response = await test_client.post("/api/items", json={**self.ITEM, "id": ""})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_delete(self, test_client, default_board):
        await test_client.post("/api/items", json=self.ITEM)

        response = await test_client.delete("/api/boards/1/items/i1")

        assert response.status_code == 204
        board = await _board(test_client)
        assert board["items"] == []

    @pytest.mark.asyncio
    async def test_delete_on_missing_board(self, test_client, default_board):
        await test_client.post("/api/items", json=self.ITEM)

        response = await test_client.delete("/api/boards/2/items/i1")

        assert response.status_code == 404
        board = await _board(test_client)
        assert len(board["items"]) == 1


class TestAdminRoutes:

    @pytest.mark.asyncio
    async def test_absent_by_default(self, test_client):
        assert (await test_client.post("/api/admin/seed")).status_code == 404
        assert (await test_client.post("/api/admin/clear")).status_code == 404

    @pytest.mark.asyncio
    async def test_seed_then_clear(self, admin_client):
        assert (await admin_client.post("/api/admin/seed")).status_code == 204
        await admin_client.patch("/api/boards", json={"id": "1", "name": "Changed"})
        await _add_column(admin_client, "Todo")

        assert (await admin_client.post("/api/admin/clear")).status_code == 204

        boards = (await admin_client.get("/api/boards")).json()
        assert boards == [{
            "id": "1",
            "name": "1st Board",
            "color": "#e0e0e0",
            "columns": [],
            "items": [],
        }]

    @pytest.mark.asyncio
    async def test_seed_is_idempotent(self, admin_client):
        await admin_client.post("/api/admin/seed")
        await admin_client.post("/api/admin/seed")

        assert len((await admin_client.get("/api/boards")).json()) == 1


class TestRateLimit:

    @pytest.mark.asyncio
    async def test_requests_over_the_limit_get_429(self, test_client, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_requests", 10)

        for _ in range(10):
            assert (await test_client.get("/api/boards")).status_code == 200

        response = await test_client.get("/api/boards")

        assert response.status_code == 429
        assert response.json()["error"] == "rate_limit_exceeded"
        assert int(response.headers["Retry-After"]) > 0

    @pytest.mark.asyncio
    async def test_default_budget_covers_an_editing_burst(self, test_client, default_board):
        """Each edit is a write followed by a board re-read, as the client does."""
        statuses = []
        for n in range(60):
            patch = await test_client.patch("/api/boards", json={"id": "1", "name": f"v{n}"})
            read = await test_client.get("/api/boards/1")
            statuses += [patch.status_code, read.status_code]

        assert 429 not in statuses
        assert set(statuses) == {200, 204}

    @pytest.mark.asyncio
    async def test_health_is_not_limited(self, test_client, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_requests", 10)

        for _ in range(12):
            response = await test_client.get("/health")

        assert response.status_code == 200


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_probes_in_memory_database(self, test_client):
        """The suite's engine never writes a database file."""
        assert not engine.url.database

        assert (await test_client.get("/health")).status_code == 200

    @pytest.mark.asyncio
    async def test_database_down_is_503(self, test_client, monkeypatch):
        broken = MagicMock()
        broken.connect.side_effect = OSError("connection refused")
        monkeypatch.setattr("app.routes.health.engine", broken)

        response = await test_client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"


class TestUnexpectedError:

    @pytest_asyncio.fixture
    async def failing_client(self):
        application = create_app()

        @application.get("/api/boom")
        async def boom():
            raise RuntimeError("boom")

        # The catch-all handler answers, then Starlette re-raises
        transport = ASGITransport(app=application, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client

    @pytest.mark.asyncio
    async def test_generated_request_id_in_500_body(self, failing_client):
        response = await failing_client.get("/api/boom")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "internal_server_error"
        assert len(body["request_id"]) == 8

    @pytest.mark.asyncio
    async def test_client_request_id_in_500_body(self, failing_client):
        response = await failing_client.get("/api/boom", headers={"X-Request-ID": "req-500"})

        assert response.json()["request_id"] == "req-500"
