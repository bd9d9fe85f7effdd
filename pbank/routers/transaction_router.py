from fastapi import APIRouter, Depends
from typing import List
from pbank.models import Transaction
from pbank.services import Services
from pbank.services.tokens import UserIdentity
from pbank.tools import fetch_identity, get_services

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("", response_model=List[Transaction])
async def get_transactions(
        identity: UserIdentity = Depends(fetch_identity),
        services: Services = Depends(get_services)
):
    return await services.transactions.list(identity.user_id)
