"""API tests for incident report endpoints."""

from httpx import AsyncClient

OPERATOR = {"X-User-Id": "u-op", "X-User-Name": "Luis Pardo", "X-User-Role": "operator"}
SUPERVISOR = {"X-User-Id": "u-sup", "X-User-Name": "Marta Ruiz", "X-User-Role": "supervisor"}
GUEST = {"X-User-Id": "u-guest", "X-User-Role": "guest"}


class TestReportsAPI:
    async def test_operator_files_report(self, client: AsyncClient, machine):
        response = await client.post(
            "/api/reports",
            json={"machine_id": machine.id, "description": "Pressure spikes", "priority": "high"},
            headers=OPERATOR,
        )

        assert response.status_code == 201
        report = response.json()
        assert report["reported_by"] == "Luis Pardo"
        assert report["machine_name"] == "HPLC-01"
        assert report["status"] == "pending"

    async def test_unknown_machine(self, client: AsyncClient):
        response = await client.post(
            "/api/reports",
            json={"machine_id": 77, "description": "Noise"},
            headers=OPERATOR,
        )

        assert response.status_code == 404

    async def test_supervisor_updates(self, client: AsyncClient, machine):
        created = await client.post(
            "/api/reports",
            json={"machine_id": machine.id, "description": "Leak"},
            headers=OPERATOR,
        )

        response = await client.put(
            f"/api/reports/{created.json()['id']}",
            json={"status": "in_progress", "assigned_to": "Ana Torres"},
            headers=SUPERVISOR,
        )

        assert response.status_code == 200
        assert response.json()["status"] == "in_progress"
        assert response.json()["assigned_to"] == "Ana Torres"

    async def test_operator_cannot_update(self, client: AsyncClient, machine):
        created = await client.post(
            "/api/reports",
            json={"machine_id": machine.id, "description": "Leak"},
            headers=OPERATOR,
        )

        response = await client.put(
            f"/api/reports/{created.json()['id']}",
            json={"status": "completed"},
            headers=OPERATOR,
        )

        assert response.status_code == 403

    async def test_guest_cannot_list(self, client: AsyncClient):
        response = await client.get("/api/reports", headers=GUEST)
        assert response.status_code == 403
