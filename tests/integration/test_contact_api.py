"""HTTP tests for /api/contact."""

from httpx import AsyncClient


class TestContactApi:
    async def test_submit_and_list(self, client: AsyncClient):
        response = await client.post(
            "/api/contact",
            json={"name": "Ravi", "email": "ravi@example.com", "message": "When is the next draw?"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["id"] == 1
        assert data["phone"] is None
        assert data["created_at"] is not None

        await client.post(
            "/api/contact",
            json={"name": "Asha", "email": "asha@example.com", "phone": "9999999999", "message": "Hello"},
        )

        rows = (await client.get("/api/contact")).json()
        assert [r["name"] for r in rows] == ["Asha", "Ravi"]

    async def test_missing_fields(self, client: AsyncClient):
        response = await client.post("/api/contact", json={"name": "Ravi", "message": "hi"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Name, email, and message are required"
