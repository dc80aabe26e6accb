"""Tests for health endpoints, request ids and startup resilience."""

from httpx import ASGITransport, AsyncClient

from matka.config import Settings
from matka.main import create_app


class TestHealth:
    async def test_health(self, client: AsyncClient):
        response = await client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert "timestamp" in response.json()

    async def test_request_id_generated(self, client: AsyncClient):
        response = await client.get("/api/health")
        assert response.headers.get("X-Request-Id")

    async def test_request_id_propagated(self, client: AsyncClient):
        response = await client.get("/api/health", headers={"X-Request-Id": "abc-123"})
        assert response.headers["X-Request-Id"] == "abc-123"

    async def test_version(self, client: AsyncClient):
        response = await client.get("/api/version")
        assert response.json()["version"] == "0.1.0"


class TestStartupResilience:
    async def test_app_serves_when_schema_init_fails(self, tmp_path):
        # a directory cannot be opened as a database file
        settings = Settings(database_url=f"sqlite+aiosqlite:///{tmp_path}", log_format="console")
        app = create_app(settings)
        async with app.router.lifespan_context(app):
            async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
                assert (await ac.get("/api/health")).status_code == 200

                response = await ac.get("/api/results/today")
                assert response.status_code == 500
                assert response.json() == {"detail": "Database operation failed"}


class TestCors:
    async def test_preflight_from_configured_origin(self, client: AsyncClient):
        response = await client.options(
            "/api/results",
            headers={"Origin": "http://localhost:5173", "Access-Control-Request-Method": "POST"},
        )
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:5173"

    async def test_unknown_origin_gets_no_allow_header(self, client: AsyncClient):
        response = await client.get("/api/health", headers={"Origin": "http://evil.example"})
        assert "access-control-allow-origin" not in response.headers
