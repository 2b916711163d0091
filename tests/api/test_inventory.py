"""API tests for inventory endpoints."""

from httpx import AsyncClient

ADMIN = {"X-User-Id": "u-admin", "X-User-Name": "Admin", "X-User-Role": "admin"}
TECHNICIAN = {"X-User-Id": "u-tech", "X-User-Name": "Ana Torres", "X-User-Role": "technician"}


class TestCreateItem:
    async def test_create_logs_opening_stock(self, client: AsyncClient):
        response = await client.post(
            "/api/inventory",
            json={
                "name": "Nitrile gloves",
                "category": "consumables",
                "quantity": 20,
                "min_quantity": 5,
            },
            headers=ADMIN,
        )

        assert response.status_code == 201
        item = response.json()
        assert item["status"] == "in_stock"
        assert item["item_type"] == "general_spare"
        assert item["version"] == 0

        movements = await client.get(f"/api/inventory/{item['id']}/movements")
        [movement] = movements.json()
        assert movement["movement_type"] == "in"
        assert movement["quantity"] == 20
        assert movement["notes"] == "Opening stock"

    async def test_wear_part_needs_lifespan(self, client: AsyncClient):
        response = await client.post(
            "/api/inventory",
            json={"name": "Lamp", "item_type": "wear_part", "usage_unit": "hours"},
            headers=ADMIN,
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_technician_cannot_create(self, client: AsyncClient):
        response = await client.post(
            "/api/inventory", json={"name": "Nitrile gloves"}, headers=TECHNICIAN
        )

        assert response.status_code == 403
        assert response.json()["error_code"] == "PERMISSION_DENIED"


class TestReadItems:
    async def test_get_missing(self, client: AsyncClient):
        response = await client.get("/api/inventory/999")

        assert response.status_code == 404
        body = response.json()
        assert body["error_code"] == "INVENTORY_ITEM_NOT_FOUND"
        assert body["path"] == "/api/inventory/999"

    async def test_list(self, client: AsyncClient, wear_item):
        response = await client.get("/api/inventory")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["name"] == "HPLC filter cartridge"


class TestUpdateItem:
    async def test_stale_version_conflicts(self, client: AsyncClient, stores, wear_item):
        item = await stores.inventory.get_item(wear_item.id)
        await stores.inventory.update_item(item)

        response = await client.put(
            f"/api/inventory/{wear_item.id}",
            json={"location": "Shelf B", "version": 0},
            headers=ADMIN,
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "CONFLICT"


class TestAdjustStock:
    async def test_adjust_into_low_stock(self, client: AsyncClient, wear_item):
        response = await client.post(
            f"/api/inventory/{wear_item.id}/adjust",
            json={"delta": -3, "notes": "Expired"},
            headers=ADMIN,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["inventory_item"]["quantity"] == 2
        assert data["movement"]["movement_type"] == "adjust"
        assert data["low_stock_alert"] is True

    async def test_adjust_below_zero(self, client: AsyncClient, wear_item):
        response = await client.post(
            f"/api/inventory/{wear_item.id}/adjust",
            json={"delta": -10},
            headers=ADMIN,
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "INSUFFICIENT_STOCK"


class TestDeleteItem:
    async def test_installed_item_cannot_be_deleted(
        self, client: AsyncClient, wear_item, installed_part
    ):
        response = await client.delete(f"/api/inventory/{wear_item.id}", headers=ADMIN)

        assert response.status_code == 400

    async def test_delete(self, client: AsyncClient, wear_item):
        response = await client.delete(f"/api/inventory/{wear_item.id}", headers=ADMIN)
        assert response.status_code == 204

        assert (await client.get(f"/api/inventory/{wear_item.id}")).status_code == 404
