from fastapi import APIRouter, Depends
from pbank.models import TransactionRequest, Transaction, ErrorBody
from pbank.services import Services
from pbank.services.tokens import UserIdentity
from pbank.tools import fetch_identity, get_services

router = APIRouter(tags=["order"])

_order_errors = {
    401: {"model": ErrorBody},
    404: {"model": ErrorBody},
    409: {"model": ErrorBody},
    422: {"model": ErrorBody},
}


@router.post("/buy", response_model=Transaction, responses=_order_errors)
async def buy_stock(
        order_body: TransactionRequest,
        identity: UserIdentity = Depends(fetch_identity),
        services: Services = Depends(get_services)
):
    return await services.ledger.buy(identity.user_id, order_body.stock_id, order_body.quantity)


@router.post("/sell", response_model=Transaction, responses=_order_errors)
async def sell_stock(
        order_body: TransactionRequest,
        identity: UserIdentity = Depends(fetch_identity),
        services: Services = Depends(get_services)
):
    return await services.ledger.sell(identity.user_id, order_body.stock_id, order_body.quantity)
