"""车辆流转测试：运输 → 验车 → 订舱 → 销售"""
import pytest

from export_office.core.exceptions import ValidationError
from export_office.models import Vehicle
from export_office.services.vehicle_flow import INSPECTION_FROM, ensure_not_sold, ensure_status

pytestmark = pytest.mark.anyio

API = "/api/admin"


async def create_vehicle(client, admin_id, port_id, chassis_no="GP1-1049000", number=2001):
    payload = {
        "date": "2025-02-01",
        "number": number,
        "status": "UNPAID",
        "added_by": admin_id,
        "vehicles": [{
            "chassis_no": chassis_no,
            "maker": "Honda",
            "year": "2013",
            "color": "Silver",
            "engine_type": "1300cc",
            "bid_amount": 200000,
            "sending_port_id": port_id,
        }],
    }
    response = await client.post(f"{API}/invoice-management/", json=payload)
    assert response.status_code == 200
    return response.json()["data"]["vehicles"][0]


async def transport(client, admin_id, vehicle):
    return await client.post(f"{API}/transport-management/", json={
        "date": "2025-02-03",
        "company": "Zenkoku Rikuso",
        "added_by": admin_id,
        "vehicles": [{
            "id": vehicle["id"],
            "vehicle_no": vehicle["chassis_no"],
            "fee": 15000,
            "fee_dollar": 100.5,
            "port": "Yokohama",
        }],
    })


async def inspect(client, admin_id, vehicle):
    return await client.post(f"{API}/inspection/", json={
        "date": "2025-02-05",
        "company": "JEVIC",
        "added_by": admin_id,
        "vehicles": [{
            "id": vehicle["id"],
            "vehicle_no": vehicle["chassis_no"],
            "amount": 8000,
            "amount_dollar": 53.6,
        }],
    })


def booking_payload(vehicle, booking_no="BK-0001", details=1):
    return {
        "booking_no": booking_no,
        "carrier": "NYK",
        "vessel": "Trans Future 5",
        "port_of_loading": "Yokohama",
        "port_of_discharge": "Karachi",
        "etd": "2025-02-10T00:00:00",
        "container_quantity": 1,
        "container_details": [{"consignee_name": "Khan Motors", "to_port": "Karachi"}] * details,
        "container_item_details": [{"vehicle_id": vehicle["id"], "amount": 1200}],
    }


class TestStatusRules:
    """状态流转规则"""

    def test_inspection_requires_transport(self):
        vehicle = Vehicle(chassis_no="X1", status="Pending")
        with pytest.raises(ValidationError):
            ensure_status(vehicle, INSPECTION_FROM, "inspected")

    def test_inspection_after_transport(self):
        vehicle = Vehicle(chassis_no="X1", status="Transport")
        ensure_status(vehicle, INSPECTION_FROM, "inspected")

    def test_sold_vehicle_cannot_be_sold_again(self):
        with pytest.raises(ValidationError):
            ensure_not_sold(Vehicle(chassis_no="X1", status="Sold"))
        ensure_not_sold(Vehicle(chassis_no="X1", status="Shipped"))


class TestTransport:
    """内陆运输"""

    async def test_transport_sets_status(self, client, admin_id, port_id):
        vehicle = await create_vehicle(client, admin_id, port_id)
        response = await transport(client, admin_id, vehicle)
        assert response.status_code == 201
        rows = response.json()["data"]
        assert rows[0]["vehicle_no"] == vehicle["chassis_no"]
        assert rows[0]["fee"] == 15000

        detail = (await client.get(f"{API}/vehicles/{vehicle['id']}")).json()["data"]
        assert detail["status"] == "Transport"
        assert len(detail["transports"]) == 1

        listing = (await client.get(f"{API}/transport-management/")).json()["data"]
        assert listing[0]["vehicles"][0]["id"] == vehicle["id"]

    async def test_transport_requires_vehicles(self, client, admin_id):
        response = await client.post(f"{API}/transport-management/", json={
            "date": "2025-02-03", "company": "Zenkoku Rikuso", "added_by": admin_id, "vehicles": [],
        })
        assert response.status_code == 400

    async def test_transport_without_id_keeps_status(self, client, admin_id, port_id):
        vehicle = await create_vehicle(client, admin_id, port_id)
        response = await transport(client, admin_id, {"id": None, "chassis_no": vehicle["chassis_no"]})
        assert response.status_code == 201

        detail = (await client.get(f"{API}/vehicles/{vehicle['id']}")).json()["data"]
        assert detail["status"] == "Pending"


class TestInspection:
    """出口验车"""

    async def test_inspection_after_transport(self, client, admin_id, port_id):
        vehicle = await create_vehicle(client, admin_id, port_id)
        await transport(client, admin_id, vehicle)

        response = await inspect(client, admin_id, vehicle)
        assert response.status_code == 201
        assert response.json()["message"] == (
            "Inspections created successfully and vehicle statuses updated where applicable"
        )

        listing = (await client.get(f"{API}/inspection/")).json()["data"]
        assert listing[0]["vehicle"]["status"] == "Inspection"

    async def test_inspection_of_pending_vehicle_rejected(self, client, admin_id, port_id):
        vehicle = await create_vehicle(client, admin_id, port_id)
        response = await inspect(client, admin_id, vehicle)
        assert response.status_code == 400
        assert (await client.get(f"{API}/inspection/")).json()["data"] == []

    async def test_inspection_missing_amount_names_index(self, client, admin_id):
        response = await client.post(f"{API}/inspection/", json={
            "date": "2025-02-05", "company": "JEVIC", "added_by": admin_id,
            "vehicles": [{"vehicle_no": "A"}],
        })
        assert response.status_code == 400
        assert response.json()["message"] == "Missing required field: vehicles.0.amount"


class TestCargo:
    """集装箱订舱"""

    async def test_booking_ships_vehicles(self, client, admin_id, port_id):
        vehicle = await create_vehicle(client, admin_id, port_id)
        await transport(client, admin_id, vehicle)

        response = await client.post(f"{API}/cargo/", json=booking_payload(vehicle))
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Cargo booking created successfully and vehicle statuses updated"
        booking = body["data"]
        assert len(booking["container_details"]) == 1
        item = booking["container_items"][0]
        assert item["chassis_no"] == vehicle["chassis_no"]
        assert item["cc"] == "1300cc"
        assert item["vehicle"]["status"] == "Shipped"

    async def test_items_belong_to_their_booking(self, client, admin_id, port_id):
        first = await create_vehicle(client, admin_id, port_id, "AAA-1", number=3001)
        second = await create_vehicle(client, admin_id, port_id, "BBB-2", number=3002)
        for vehicle in (first, second):
            await transport(client, admin_id, vehicle)

        await client.post(f"{API}/cargo/", json=booking_payload(first, "BK-1"))
        await client.post(f"{API}/cargo/", json=booking_payload(second, "BK-2"))

        bookings = (await client.get(f"{API}/cargo/")).json()["data"]
        items = {b["booking_no"]: [i["chassis_no"] for i in b["container_items"]] for b in bookings}
        assert items == {"BK-1": ["AAA-1"], "BK-2": ["BBB-2"]}

    async def test_requires_exactly_one_detail(self, client, admin_id, port_id):
        vehicle = await create_vehicle(client, admin_id, port_id)
        await transport(client, admin_id, vehicle)

        response = await client.post(f"{API}/cargo/", json=booking_payload(vehicle, details=2))
        assert response.status_code == 400
        assert response.json()["message"] == "Exactly one ContainerDetail entry is required"

    async def test_item_requires_vehicle_id(self, client, admin_id, port_id):
        vehicle = await create_vehicle(client, admin_id, port_id)
        payload = booking_payload(vehicle)
        payload["container_item_details"] = [{"chassis_no": "X"}]
        response = await client.post(f"{API}/cargo/", json=payload)
        assert response.status_code == 400
        assert response.json()["message"] == "Missing required field: container_item_details.0.vehicle_id"

    async def test_duplicate_booking_no(self, client, admin_id, port_id):
        vehicle = await create_vehicle(client, admin_id, port_id)
        await transport(client, admin_id, vehicle)
        await client.post(f"{API}/cargo/", json=booking_payload(vehicle))

        response = await client.post(f"{API}/cargo/", json=booking_payload(vehicle))
        assert response.status_code == 400


class TestSale:
    """车辆销售"""

    async def test_sale_marks_vehicle_sold(self, client, admin_id, port_id):
        vehicle = await create_vehicle(client, admin_id, port_id)
        sale = {
            "admin_id": admin_id,
            "vehicle_no": vehicle["chassis_no"],
            "date": "2025-03-01",
            "sale_price": 5000,
            "commission_amount": 200,
            "fullname": "Ali Raza",
        }
        response = await client.post(f"{API}/sale/", json=sale)
        assert response.status_code == 201
        assert response.json()["data"]["total_amount"] == 5200

        detail = (await client.get(f"{API}/vehicles/{vehicle['id']}")).json()["data"]
        assert detail["status"] == "Sold"

        again = await client.post(f"{API}/sale/", json=sale)
        assert again.status_code == 400
        assert again.json()["message"] == f"Vehicle {vehicle['chassis_no']} is already sold"

    async def test_sale_unknown_vehicle(self, client, admin_id):
        response = await client.post(f"{API}/sale/", json={
            "admin_id": admin_id, "vehicle_no": "NOPE", "date": "2025-03-01", "sale_price": 100,
        })
        assert response.status_code == 404
        assert response.json()["message"] == "Vehicle with vehicle_no NOPE not found"

    async def test_sale_unknown_admin(self, client, admin_id):
        response = await client.post(f"{API}/sale/", json={
            "admin_id": admin_id + 50, "vehicle_no": "NOPE", "date": "2025-03-01", "sale_price": 100,
        })
        assert response.status_code == 404
        assert response.json()["message"] == "Admin not found"


class TestVehicles:
    """车辆查询"""

    async def test_empty_list(self, client):
        response = await client.get(f"{API}/vehicles/")
        assert response.status_code == 200
        assert response.json()["message"] == "No vehicles found"

    async def test_status_filter(self, client, admin_id, port_id):
        vehicle = await create_vehicle(client, admin_id, port_id)
        await transport(client, admin_id, vehicle)

        pending = (await client.get(f"{API}/vehicles/", params={"status": "Pending"})).json()
        moving = (await client.get(f"{API}/vehicles/", params={"status": "Transport"})).json()
        assert pending["data"] == []
        assert moving["data"][0]["sea_port"]["name"] == "Yokohama"

    async def test_non_numeric_id(self, client):
        response = await client.get(f"{API}/vehicles/abc")
        assert response.status_code == 400

    async def test_missing_vehicle(self, client):
        response = await client.get(f"{API}/vehicles/999")
        assert response.status_code == 404
