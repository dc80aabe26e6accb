"""HTTP tests for /api/results and /api/super-game."""

from __future__ import annotations

from datetime import date, timedelta

import pytest
from httpx import AsyncClient

from matka.results.ledger import calendar_today


def _today() -> date:
    return calendar_today("UTC")()


class TestResultsApi:
    async def test_upsert_then_update(self, client: AsyncClient):
        body = {"result_date": "2024-01-01", "time_slot": "Morning", "number_1": 12, "number_2": 34}
        response = await client.post("/api/results", json=body)
        assert response.status_code == 201
        assert response.json() == {
            "id": 1,
            "result_date": "2024-01-01",
            "time_slot": "Morning",
            "number_1": 12,
            "number_2": 34,
        }

        response = await client.post("/api/results", json={**body, "number_1": 56, "number_2": 78})
        assert response.status_code == 201
        assert response.json()["id"] == 1
        assert (response.json()["number_1"], response.json()["number_2"]) == (56, 78)

        rows = (await client.get("/api/results/search", params={"date": "2024-01-01"})).json()
        assert len(rows) == 1

    @pytest.mark.parametrize(
        "body",
        [
            {"time_slot": "Morning", "number_1": 1, "number_2": 2},
            {"result_date": "2024-01-01", "number_1": 1, "number_2": 2},
            {"result_date": "2024-01-01", "time_slot": "Morning", "number_1": "", "number_2": 2},
            {"result_date": "2024-01-01", "time_slot": "Morning", "number_1": 1, "number_2": None},
        ],
    )
    async def test_missing_fields(self, client: AsyncClient, body: dict):
        response = await client.post("/api/results", json=body)
        assert response.status_code == 400
        assert response.json()["detail"] == "All fields are required"

    async def test_malformed_number_is_400(self, client: AsyncClient):
        response = await client.post(
            "/api/results",
            json={"result_date": "2024-01-01", "time_slot": "Morning", "number_1": "abc", "number_2": 2},
        )
        assert response.status_code == 400

    async def test_today_and_previous(self, client: AsyncClient):
        today = _today()
        yesterday = today - timedelta(days=1)
        for d, slot in [(today, "Morning"), (yesterday, "Morning")]:
            await client.post(
                "/api/results",
                json={"result_date": d.isoformat(), "time_slot": slot, "number_1": 1, "number_2": 2},
            )

        today_rows = (await client.get("/api/results/today")).json()
        previous_rows = (await client.get("/api/results/previous")).json()
        recent_rows = (await client.get("/api/results/recent")).json()

        assert [r["result_date"] for r in today_rows] == [today.isoformat()]
        assert [r["result_date"] for r in previous_rows] == [yesterday.isoformat()]
        assert [r["result_date"] for r in recent_rows] == [today.isoformat(), yesterday.isoformat()]

    async def test_search_by_number(self, client: AsyncClient):
        await client.post(
            "/api/results", json={"result_date": "2024-01-01", "time_slot": "A", "number_1": 5, "number_2": 7}
        )
        await client.post(
            "/api/results", json={"result_date": "2024-01-02", "time_slot": "A", "number_1": 8, "number_2": 9}
        )
        rows = (await client.get("/api/results/search", params={"number": "7"})).json()
        assert [r["result_date"] for r in rows] == ["2024-01-01"]

    async def test_search_rejects_bad_params(self, client: AsyncClient):
        assert (await client.get("/api/results/search", params={"number": "x"})).status_code == 400
        assert (await client.get("/api/results/search", params={"date": "01/02/2024"})).status_code == 400

    async def test_search_number_out_of_range(self, client: AsyncClient):
        response = await client.get("/api/results/search", params={"number": "99999999999999999999"})
        assert response.status_code == 400
        assert response.json()["detail"] == "number is out of range"

    async def test_upsert_number_out_of_range(self, client: AsyncClient):
        response = await client.post(
            "/api/results",
            json={"result_date": "2024-01-01", "time_slot": "A", "number_1": 2**31, "number_2": 2},
        )
        assert response.status_code == 400

    async def test_delete(self, client: AsyncClient):
        created = await client.post(
            "/api/results", json={"result_date": "2024-01-01", "time_slot": "A", "number_1": 1, "number_2": 2}
        )
        result_id = created.json()["id"]

        response = await client.delete(f"/api/results/{result_id}")
        assert response.status_code == 200
        assert response.json() == {"message": "Result deleted successfully"}

        response = await client.delete(f"/api/results/{result_id}")
        assert response.status_code == 404
        assert response.json()["detail"] == "Result not found"

    async def test_delete_huge_id_is_404(self, client: AsyncClient):
        response = await client.delete("/api/results/99999999999999999999")
        assert response.status_code == 404
        assert response.json()["detail"] == "Result not found"


class TestSuperGameApi:
    async def test_super_game_is_independent(self, client: AsyncClient):
        today = _today().isoformat()
        body = {"result_date": today, "time_slot": "Morning", "number_1": 3, "number_2": 4}

        response = await client.post("/api/super-game", json=body)
        assert response.status_code == 201

        assert len((await client.get("/api/super-game/recent")).json()) == 1
        assert (await client.get("/api/results/recent")).json() == []

    async def test_super_game_delete(self, client: AsyncClient):
        created = await client.post(
            "/api/super-game", json={"result_date": "2024-01-01", "time_slot": "A", "number_1": 1, "number_2": 2}
        )
        assert (await client.delete(f"/api/super-game/{created.json()['id']}")).status_code == 200
        assert (await client.delete("/api/super-game/12345")).status_code == 404
