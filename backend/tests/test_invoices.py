"""发票管理接口测试"""
import pytest

from export_office.services.ledger import get_current_balance, post_transaction

pytestmark = pytest.mark.anyio

URL = "/api/admin/invoice-management/"


def invoice_payload(admin_id, port_id, number=1001, status="UNPAID", **overrides):
    payload = {
        "date": "2025-01-15",
        "number": number,
        "status": status,
        "added_by": admin_id,
        "auction_house": "USS Tokyo",
        "amount_yen": 115000,
        "exchange_rate": 0.0067,
        "vehicles": [
            {
                "chassis_no": "NZE141-1000001",
                "maker": "Toyota",
                "year": 2012,
                "color": "White",
                "engine_type": "1500cc",
                "bid_amount": 100000,
                "recycle_amount": 5000,
                "commission_amount": "",
                "sending_port_id": port_id,
                "vehicle_images": ["/uploads/a.jpg", "/uploads/a.jpg", "/uploads/b.jpg"],
            }
        ],
    }
    payload.update(overrides)
    return payload


async def fund(session_factory, admin_id, amount):
    async with session_factory() as session:
        await post_transaction(session, admin_id, amount_in=amount, details="Opening balance")
        await session.commit()


class TestCreateInvoice:
    """创建发票"""

    async def test_creates_invoice_with_vehicles(self, client, admin_id, port_id):
        """发票、车辆、图片一次创建，合计金额由服务端计算"""
        response = await client.post(URL, json=invoice_payload(admin_id, port_id))
        assert response.status_code == 200
        body = response.json()
        assert body["status"] is True
        assert body["message"] == "Invoice and vehicles created successfully"

        invoice = body["data"]["invoice"]
        assert invoice["number"] == 1001
        assert invoice["amount_dollar"] == 770.5

        vehicle = body["data"]["vehicles"][0]
        assert vehicle["invoice_no"] == "1001"
        assert vehicle["year"] == "2012"
        assert vehicle["status"] == "Pending"
        assert vehicle["distributor_id"] == 1
        assert vehicle["is_document_required"] == "no"
        assert vehicle["auction_house"] == "USS Tokyo"
        assert vehicle["ten_percent_add"] == 10000
        assert vehicle["total_amount_yen"] == 115000
        assert vehicle["total_amount_dollars"] == 770.5
        # 重复图片被跳过
        assert [i["image_path"] for i in vehicle["images"]] == ["/uploads/a.jpg", "/uploads/b.jpg"]

    async def test_given_totals_are_kept(self, client, admin_id, port_id):
        payload = invoice_payload(admin_id, port_id)
        payload["vehicles"][0]["total_amount_yen"] = 120000
        response = await client.post(URL, json=payload)
        assert response.status_code == 200
        assert response.json()["data"]["vehicles"][0]["total_amount_yen"] == 120000

    async def test_rejects_non_json_body(self, client):
        response = await client.post(URL, content="number=1", headers={"Content-Type": "text/plain"})
        assert response.status_code == 400
        assert response.json() == {
            "message": "Content-Type must be 'application/json'",
            "status": False,
            "error": "Content-Type must be 'application/json'",
        }

    async def test_missing_required_field(self, client, admin_id, port_id):
        payload = invoice_payload(admin_id, port_id)
        del payload["number"]
        response = await client.post(URL, json=payload)
        assert response.status_code == 400
        assert response.json()["message"] == "Missing required field: number"

    async def test_vehicle_requires_sending_port(self, client, admin_id, port_id):
        payload = invoice_payload(admin_id, port_id)
        del payload["vehicles"][0]["sending_port_id"]
        response = await client.post(URL, json=payload)
        assert response.status_code == 400
        assert response.json()["message"] == "Missing required field: vehicles.0.sending_port_id"

    async def test_unknown_sending_port_names_index(self, client, admin_id, port_id):
        response = await client.post(URL, json=invoice_payload(admin_id, port_id + 99))
        assert response.status_code == 400
        assert "index 0" in response.json()["message"]

    async def test_duplicate_number(self, client, admin_id, port_id):
        await client.post(URL, json=invoice_payload(admin_id, port_id))
        response = await client.post(URL, json=invoice_payload(admin_id, port_id))
        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "An invoice with this number already exists"
        assert body["error"] == "Duplicate invoice number"

    async def test_unknown_vehicle_status(self, client, admin_id, port_id):
        payload = invoice_payload(admin_id, port_id)
        payload["vehicles"][0]["status"] = "Banana"
        response = await client.post(URL, json=payload)
        assert response.status_code == 400
        assert response.json()["message"].startswith("Invalid value for vehicles.0.status")

    async def test_blank_vehicle_status_defaults_to_pending(self, client, admin_id, port_id):
        payload = invoice_payload(admin_id, port_id)
        payload["vehicles"][0]["status"] = ""
        response = await client.post(URL, json=payload)
        assert response.json()["data"]["vehicles"][0]["status"] == "Pending"

    async def test_unknown_admin(self, client, admin_id, port_id):
        """录入人不存在时不论是否付款都不落库"""
        response = await client.post(URL, json=invoice_payload(admin_id + 999, port_id))
        assert response.status_code == 404
        assert response.json()["message"] == "Admin not found"
        assert (await client.get(URL)).json()["data"] == []

    async def test_unknown_distributor_names_index(self, client, admin_id, port_id):
        payload = invoice_payload(admin_id, port_id)
        payload["vehicles"][0]["distributor_id"] = 77
        response = await client.post(URL, json=payload)
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid distributor for vehicle at index 0"
        assert (await client.get("/api/admin/vehicles/")).json()["data"] == []

    async def test_malformed_json(self, client):
        response = await client.post(URL, content='{"number": ', headers={"Content-Type": "application/json"})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid JSON body"


class TestInvoicePayment:
    """已付款发票扣减余额"""

    async def test_paid_invoice_without_balance_persists_nothing(self, client, admin_id, port_id):
        response = await client.post(URL, json=invoice_payload(admin_id, port_id, status="PAID"))
        assert response.status_code == 400
        assert response.json()["message"] == "Insufficient admin balance for this transaction"

        listing = await client.get(URL)
        assert listing.json()["data"] == []
        vehicles = await client.get("/api/admin/vehicles/")
        assert vehicles.json()["message"] == "No vehicles found"

    async def test_paid_invoice_posts_ledger_payment(self, client, session_factory, admin_id, port_id):
        await fund(session_factory, admin_id, 1000)

        response = await client.post(URL, json=invoice_payload(admin_id, port_id, status="PAID"))
        assert response.status_code == 200

        async with session_factory() as session:
            assert float(await get_current_balance(session, admin_id)) == 229.5

        ledger = (await client.get("/api/admin/ledger/")).json()["data"]
        payment = ledger["transactions"][0]
        assert payment["amount_out"] == 770.5
        assert payment["details"] == "Payment for Invoice #1001"
        assert payment["pre_balance"] == 1000
        assert ledger["total_in"] == 1000
        assert ledger["total_out"] == 770.5

    async def test_update_to_paid_posts_payment(self, client, session_factory, admin_id, port_id):
        await fund(session_factory, admin_id, 800)
        created = (await client.post(URL, json=invoice_payload(admin_id, port_id))).json()
        invoice_id = created["data"]["invoice"]["id"]

        response = await client.put(f"{URL}{invoice_id}", json={"status": "PAID"})
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "PAID"

        balance = (await client.get(f"/api/admin/ledger/balance/{admin_id}")).json()["data"]
        assert balance["balance"] == 29.5

    async def test_paid_invoice_cannot_revert(self, client, session_factory, admin_id, port_id):
        await fund(session_factory, admin_id, 800)
        created = (await client.post(URL, json=invoice_payload(admin_id, port_id, status="PAID"))).json()
        invoice_id = created["data"]["invoice"]["id"]

        response = await client.put(f"{URL}{invoice_id}", json={"status": "UNPAID"})
        assert response.status_code == 400


class TestReadAndDelete:
    """查询与删除"""

    async def test_get_invoice(self, client, admin_id, port_id):
        created = (await client.post(URL, json=invoice_payload(admin_id, port_id))).json()
        invoice_id = created["data"]["invoice"]["id"]

        response = await client.get(f"{URL}{invoice_id}")
        assert response.status_code == 200
        assert len(response.json()["data"]["vehicles"]) == 1

        missing = await client.get(f"{URL}{invoice_id + 1}")
        assert missing.status_code == 404
        assert missing.json()["status"] is False

    async def test_vehicle_search(self, client, admin_id, port_id):
        await client.post(URL, json=invoice_payload(admin_id, port_id))

        response = await client.get(f"{URL}vehicle-search/NZE141-1000001")
        assert response.status_code == 200
        vehicle = response.json()["data"]
        assert vehicle["sea_port"]["name"] == "Yokohama"
        assert vehicle["distributor"]["id"] == 1
        assert len(vehicle["images"]) == 2

        missing = await client.get(f"{URL}vehicle-search/UNKNOWN")
        assert missing.status_code == 404
        assert missing.json()["message"] == "Vehicle not found"

    async def test_delete_unpaid_invoice(self, client, admin_id, port_id):
        created = (await client.post(URL, json=invoice_payload(admin_id, port_id))).json()
        invoice_id = created["data"]["invoice"]["id"]

        response = await client.delete(f"{URL}{invoice_id}")
        assert response.status_code == 200
        assert (await client.get(f"{URL}{invoice_id}")).status_code == 404
        assert (await client.get("/api/admin/vehicles/")).json()["data"] == []

    async def test_paid_invoice_cannot_be_deleted(self, client, session_factory, admin_id, port_id):
        await fund(session_factory, admin_id, 1000)
        created = (await client.post(URL, json=invoice_payload(admin_id, port_id, status="PAID"))).json()

        response = await client.delete(f"{URL}{created['data']['invoice']['id']}")
        assert response.status_code == 400
        assert response.json()["message"] == "Only UNPAID invoices can be deleted"

    async def test_invoice_with_moving_vehicle_cannot_be_deleted(self, client, admin_id, port_id):
        """车辆已进入运输后发票不可删除"""
        created = (await client.post(URL, json=invoice_payload(admin_id, port_id))).json()
        invoice_id = created["data"]["invoice"]["id"]
        vehicle = created["data"]["vehicles"][0]
        await client.post("/api/admin/transport-management/", json={
            "date": "2025-01-20",
            "company": "Zenkoku Rikuso",
            "added_by": admin_id,
            "vehicles": [{"id": vehicle["id"], "vehicle_no": vehicle["chassis_no"], "fee": 10000, "fee_dollar": 67}],
        })

        response = await client.delete(f"{URL}{invoice_id}")
        assert response.status_code == 400
        assert response.json()["message"] == "Invoice vehicles are already in progress"
        assert (await client.get(f"{URL}{invoice_id}")).status_code == 200
