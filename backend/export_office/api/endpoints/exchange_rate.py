"""汇率API - JPY → USD"""
from typing import Any
from fastapi import APIRouter, Depends, Query

from export_office.schemas.common import ok
from export_office.services.currency import ExchangeRateClient, get_jpy_usd_rate, yen_to_usd

router = APIRouter()


def get_rate_client() -> ExchangeRateClient:
    return ExchangeRateClient()


@router.get("/")
async def get_rate(
    *,
    client: ExchangeRateClient = Depends(get_rate_client)) -> Any:
    """当前汇率及来源（live / cached / fallback）"""
    quote = await get_jpy_usd_rate(client)
    return ok("Exchange rate fetched successfully", {
        "base": "JPY",
        "target": "USD",
        "rate": quote.rate,
        "source": quote.source,
        "fetched_at": quote.fetched_at,
    })


@router.get("/convert")
async def convert(
    *,
    client: ExchangeRateClient = Depends(get_rate_client),
    amount_yen: float = Query(..., ge=0, description="日元金额")) -> Any:
    """日元换算美元"""
    quote = await get_jpy_usd_rate(client)
    return ok("Amount converted successfully", {
        "amount_yen": amount_yen,
        "amount_usd": float(yen_to_usd(amount_yen, quote.rate)),
        "rate": quote.rate,
        "source": quote.source,
    })
