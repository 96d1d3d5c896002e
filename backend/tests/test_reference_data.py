"""基础资料测试：港口、分销商、管理员"""
import pytest

pytestmark = pytest.mark.anyio

API = "/api/admin"


class TestSeaPorts:
    """港口"""

    async def test_create_and_list(self, client):
        response = await client.post(f"{API}/sea_ports/", json={"name": "Nagoya"})
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Sea port created successfully"
        assert body["data"]["location"] == ""

        ports = (await client.get(f"{API}/sea_ports/")).json()["data"]
        assert ports[0]["name"] == "Nagoya"
        assert ports[0]["vehicles"] == []

    async def test_name_required(self, client):
        response = await client.post(f"{API}/sea_ports/", json={"location": "Aichi"})
        assert response.status_code == 400
        assert response.json()["message"] == "Missing required field: name"

    async def test_update(self, client, port_id):
        response = await client.put(f"{API}/sea_ports/{port_id}", json={"location": "Honmoku"})
        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Yokohama"
        assert response.json()["data"]["location"] == "Honmoku"

    async def test_delete_refused_while_in_use(self, client, admin_id, port_id):
        await client.post(f"{API}/invoice-management/", json={
            "date": "2025-01-01", "number": 1, "status": "UNPAID", "added_by": admin_id,
            "vehicles": [{"chassis_no": "C-1", "sending_port_id": port_id}],
        })
        response = await client.delete(f"{API}/sea_ports/{port_id}")
        assert response.status_code == 400

    async def test_delete(self, client, port_id):
        assert (await client.delete(f"{API}/sea_ports/{port_id}")).status_code == 200
        assert (await client.delete(f"{API}/sea_ports/{port_id}")).status_code == 404


class TestDistributors:
    """分销商"""

    async def test_default_distributor_seeded(self, client):
        distributors = (await client.get(f"{API}/distributors/")).json()["data"]
        assert [d["id"] for d in distributors] == [1]

    async def test_default_cannot_be_deleted(self, client):
        response = await client.delete(f"{API}/distributors/1")
        assert response.status_code == 400

    async def test_crud(self, client):
        created = (await client.post(f"{API}/distributors/", json={"name": "Gulf Autos", "location": "Dubai"})).json()
        distributor_id = created["data"]["id"]

        updated = await client.put(f"{API}/distributors/{distributor_id}", json={"name": "Gulf Autos LLC"})
        assert updated.json()["data"]["name"] == "Gulf Autos LLC"

        assert (await client.delete(f"{API}/distributors/{distributor_id}")).status_code == 200


class TestAdmins:
    """管理员"""

    async def test_create_and_get(self, client):
        created = await client.post(f"{API}/admins/", json={"fullname": "Sato Ken", "username": "sato"})
        assert created.status_code == 201
        admin = created.json()["data"]
        assert admin["balance"] == 0
        assert admin["is_active"] is True

        fetched = await client.get(f"{API}/admins/{admin['id']}")
        assert fetched.json()["data"]["username"] == "sato"

    async def test_duplicate_username(self, client):
        response = await client.post(f"{API}/admins/", json={"fullname": "Another", "username": "admin"})
        assert response.status_code == 400
        assert response.json()["message"] == "Username already exists"


class TestApp:
    """根路由"""

    async def test_health(self, client):
        response = await client.get("/health")
        assert response.json() == {"status": "ok"}
