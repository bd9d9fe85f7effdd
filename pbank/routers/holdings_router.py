from fastapi import APIRouter, Depends
from typing import List
from uuid import UUID
from pbank.models import Holding, ErrorBody
from pbank.services import Services
from pbank.services.tokens import UserIdentity
from pbank.tools import fetch_identity, get_services

router = APIRouter(prefix="/holdings", tags=["holdings"])


@router.get("", response_model=List[Holding])
async def get_holdings(
        identity: UserIdentity = Depends(fetch_identity),
        services: Services = Depends(get_services)
):
    holdings = await services.ledger.holdings(identity.user_id)
    return [
        Holding(stock_id=stock.id, symbol=stock.symbol, quantity=quantity)
        for stock, quantity in holdings
    ]


@router.get("/{stock_id}", response_model=Holding, responses={404: {"model": ErrorBody}})
async def get_holding(
        stock_id: UUID,
        identity: UserIdentity = Depends(fetch_identity),
        services: Services = Depends(get_services)
):
    stock = await services.stocks.get(stock_id)
    quantity = await services.ledger.get_holding(identity.user_id, stock_id)
    return Holding(stock_id=stock.id, symbol=stock.symbol, quantity=quantity)
