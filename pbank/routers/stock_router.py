from fastapi import APIRouter, Depends
from pbank.models import Stock, ErrorBody
from pbank.services import Services
from pbank.services.tokens import UserIdentity
from pbank.tools import fetch_identity, get_services

router = APIRouter(prefix="/stocks", tags=["stocks"])


@router.get("/{symbol}", response_model=Stock, responses={404: {"model": ErrorBody}})
async def get_stock(
        symbol: str,
        identity: UserIdentity = Depends(fetch_identity),
        services: Services = Depends(get_services)
):
    return await services.stocks.get_by_symbol(symbol)
