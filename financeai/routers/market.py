from fastapi import APIRouter, Request

from financeai.routers.common import get_service

router = APIRouter(prefix="/api/market", tags=["market"])


@router.get("/indices")
def indices(request: Request):
    return get_service(request, "market_service").indices()


@router.get("/top-gainers")
def top_gainers(request: Request):
    return get_service(request, "market_service").top_gainers()
