"""API tests for health endpoints."""

from httpx import AsyncClient


class TestHealthAPI:
    async def test_health(self, client: AsyncClient):
        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["storage_backend"] == "memory"
        assert data["uptime_seconds"] >= 0

    async def test_db_health(self, client: AsyncClient):
        response = await client.get("/api/health/db")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["backend"] == "memory"

    async def test_root_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.json()["status"] == "healthy"
