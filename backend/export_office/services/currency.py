"""
汇率服务 - 日元(JPY) → 美元(USD)

数据来源：exchangerate-api.com 的 pair 接口
    GET {EXCHANGE_RATE_API_URL}/{key}/pair/JPY/USD
    → {"result": "success", "conversion_rate": 0.0067, ...}

取值顺序：未过期的缓存 → 实时接口 → 过期缓存 → 配置的兜底汇率
"""

import logging
import time
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

import httpx

from export_office.core.config import settings
from export_office.core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

TEN_PERCENT = Decimal("0.1")
CENT = Decimal("0.01")


@dataclass
class RateQuote:
    rate: float
    source: str  # live / cached / fallback
    fetched_at: Optional[float] = None


class ExchangeRateClient:
    """exchangerate-api.com 客户端"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = settings.EXCHANGE_RATE_API_KEY if api_key is None else api_key
        self.base_url = (base_url or settings.EXCHANGE_RATE_API_URL).rstrip("/")
        self.timeout = timeout or settings.EXCHANGE_RATE_TIMEOUT
        self.transport = transport

    async def fetch_pair_rate(self, base: str = "JPY", target: str = "USD") -> float:
        """查询实时汇率，失败抛出 ExternalServiceError"""
        if not self.api_key:
            raise ExternalServiceError("Exchange rate API key is not configured")

        url = f"{self.base_url}/{self.api_key}/pair/{base}/{target}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url)
        except httpx.TimeoutException:
            raise ExternalServiceError("Failed to fetch exchange rate", "Exchange rate request timed out")
        except httpx.RequestError as e:
            raise ExternalServiceError("Failed to fetch exchange rate", f"Connection error: {e}")

        if response.status_code != 200:
            raise ExternalServiceError(
                "Failed to fetch exchange rate",
                f"Exchange rate API returned {response.status_code}"
            )

        try:
            data = response.json()
        except ValueError:
            raise ExternalServiceError("Failed to fetch exchange rate", "Exchange rate API returned invalid JSON")

        rate = data.get("conversion_rate")
        if data.get("result") == "error" or not isinstance(rate, (int, float)) or rate <= 0:
            raise ExternalServiceError(
                "Failed to fetch exchange rate",
                f"Unexpected payload: {data.get('error-type', 'missing conversion_rate')}"
            )
        return float(rate)


class RateCache:
    """进程内缓存的最新汇率"""

    def __init__(self):
        self.rate: Optional[float] = None
        self.fetched_at: Optional[float] = None

    def store(self, rate: float) -> None:
        self.rate = rate
        self.fetched_at = time.time()

    def is_fresh(self, ttl_seconds: int) -> bool:
        return self.rate is not None and self.fetched_at is not None and (
            time.time() - self.fetched_at < ttl_seconds
        )

    def clear(self) -> None:
        self.rate = None
        self.fetched_at = None


rate_cache = RateCache()


async def refresh_rate(client: Optional[ExchangeRateClient] = None) -> float:
    """拉取实时汇率并写入缓存"""
    client = client or ExchangeRateClient()
    rate = await client.fetch_pair_rate()
    rate_cache.store(rate)
    logger.info(f"💱 汇率已更新: 1 JPY = {rate} USD")
    return rate


async def get_jpy_usd_rate(client: Optional[ExchangeRateClient] = None) -> RateQuote:
    """获取当前可用的 JPY→USD 汇率"""
    if rate_cache.is_fresh(settings.EXCHANGE_RATE_TTL_SECONDS):
        return RateQuote(rate=rate_cache.rate, source="cached", fetched_at=rate_cache.fetched_at)

    try:
        rate = await refresh_rate(client)
        return RateQuote(rate=rate, source="live", fetched_at=rate_cache.fetched_at)
    except ExternalServiceError as e:
        logger.warning(f"汇率接口不可用: {e.error}")

    if rate_cache.rate is not None:
        return RateQuote(rate=rate_cache.rate, source="cached", fetched_at=rate_cache.fetched_at)
    return RateQuote(rate=settings.EXCHANGE_RATE_FALLBACK, source="fallback")


def yen_to_usd(amount_yen, rate) -> Decimal:
    """日元换算美元，保留两位小数"""
    if not rate:
        return Decimal("0.00")
    amount = Decimal(str(amount_yen or 0)) * Decimal(str(rate))
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def compute_vehicle_totals(
    bid_amount=0,
    recycle_amount=0,
    commission_amount=0,
    number_plate_tax=0,
    repair_charges=0,
    additional_amount=0,
    rate: Optional[float] = None,
) -> dict:
    """
    计算车辆合计金额

    ten_percent_add = 竞拍价 × 10%
    total_amount_yen = 竞拍价 + 10%附加 + 回收费 + 佣金 + 牌照税 + 维修费 + 其他附加
    total_amount_dollars = total_amount_yen × 汇率（无汇率时为0）
    """
    bid = Decimal(str(bid_amount or 0))
    ten_percent_add = (bid * TEN_PERCENT).quantize(CENT, rounding=ROUND_HALF_UP)
    total_yen = bid + ten_percent_add + sum(
        Decimal(str(v or 0))
        for v in (recycle_amount, commission_amount, number_plate_tax, repair_charges, additional_amount)
    )
    total_yen = total_yen.quantize(CENT, rounding=ROUND_HALF_UP)
    return {
        "ten_percent_add": ten_percent_add,
        "total_amount_yen": total_yen,
        "total_amount_dollars": yen_to_usd(total_yen, rate),
    }
