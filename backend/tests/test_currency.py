"""汇率服务测试"""
from decimal import Decimal

import httpx
import pytest

from export_office.api.endpoints.exchange_rate import get_rate_client
from export_office.core.exceptions import ExternalServiceError
from export_office.main import app
from export_office.services.currency import (
    ExchangeRateClient, compute_vehicle_totals, get_jpy_usd_rate, rate_cache, yen_to_usd,
)

pytestmark = pytest.mark.anyio


def mock_client(handler, api_key="test-key"):
    return ExchangeRateClient(
        api_key=api_key, base_url="https://rates.test/v6", transport=httpx.MockTransport(handler)
    )


def pair_response(rate):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v6/test-key/pair/JPY/USD"
        return httpx.Response(200, json={"result": "success", "conversion_rate": rate})
    return handler


def failing(request: httpx.Request) -> httpx.Response:
    return httpx.Response(500, json={"result": "error"})


class TestConversion:
    """金额换算"""

    def test_yen_to_usd(self):
        assert yen_to_usd(100000, 0.0067) == Decimal("670.00")
        assert yen_to_usd(12345, 0.00671) == Decimal("82.83")
        assert yen_to_usd(100000, None) == Decimal("0.00")

    def test_vehicle_totals(self):
        totals = compute_vehicle_totals(
            bid_amount=500000, recycle_amount=12000, commission_amount=30000,
            number_plate_tax=2000, repair_charges=0, additional_amount=1000, rate=0.0067,
        )
        assert totals["ten_percent_add"] == Decimal("50000.00")
        assert totals["total_amount_yen"] == Decimal("595000.00")
        assert totals["total_amount_dollars"] == Decimal("3986.50")

    def test_vehicle_totals_without_rate(self):
        totals = compute_vehicle_totals(bid_amount=1000)
        assert totals["total_amount_yen"] == Decimal("1100.00")
        assert totals["total_amount_dollars"] == Decimal("0.00")


class TestRateClient:
    """汇率接口客户端"""

    async def test_fetch_rate(self):
        assert await mock_client(pair_response(0.0068)).fetch_pair_rate() == 0.0068

    async def test_missing_key(self):
        with pytest.raises(ExternalServiceError):
            await mock_client(pair_response(0.0068), api_key="").fetch_pair_rate()

    async def test_http_error(self):
        with pytest.raises(ExternalServiceError):
            await mock_client(failing).fetch_pair_rate()

    async def test_bad_payload(self):
        with pytest.raises(ExternalServiceError):
            await mock_client(pair_response("n/a")).fetch_pair_rate()


class TestRateSelection:
    """缓存 → 实时 → 过期缓存 → 兜底"""

    async def test_live_then_cached(self):
        first = await get_jpy_usd_rate(mock_client(pair_response(0.0069)))
        assert (first.rate, first.source) == (0.0069, "live")

        second = await get_jpy_usd_rate(mock_client(failing))
        assert (second.rate, second.source) == (0.0069, "cached")

    async def test_stale_cache_used_when_api_fails(self):
        rate_cache.store(0.0065)
        rate_cache.fetched_at -= 10 ** 6
        quote = await get_jpy_usd_rate(mock_client(failing))
        assert (quote.rate, quote.source) == (0.0065, "cached")

    async def test_fallback(self):
        quote = await get_jpy_usd_rate(mock_client(failing))
        assert (quote.rate, quote.source) == (0.0067, "fallback")


class TestRateApi:
    """汇率接口"""

    async def test_convert(self, client):
        app.dependency_overrides[get_rate_client] = lambda: mock_client(pair_response(0.007))
        response = await client.get("/api/admin/exchange-rate/convert", params={"amount_yen": 250000})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["amount_usd"] == 1750
        assert data["source"] == "live"

    async def test_convert_requires_amount(self, client):
        app.dependency_overrides[get_rate_client] = lambda: mock_client(failing)
        response = await client.get("/api/admin/exchange-rate/convert")
        assert response.status_code == 400
        assert response.json()["message"] == "Missing required field: amount_yen"

    async def test_rate_fallback(self, client):
        app.dependency_overrides[get_rate_client] = lambda: mock_client(failing)
        data = (await client.get("/api/admin/exchange-rate/")).json()["data"]
        assert data["source"] == "fallback"
        assert data["rate"] == 0.0067
