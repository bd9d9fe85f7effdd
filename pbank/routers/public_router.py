from fastapi import APIRouter, Depends
from pbank.models import LoginRequest, LoginResponse, Ok, ErrorBody
from pbank.services import Services
from pbank.tools import get_services

router = APIRouter(tags=["public"])


@router.post("/login", response_model=LoginResponse, responses={401: {"model": ErrorBody}})
async def login(credentials: LoginRequest, services: Services = Depends(get_services)):
    user = await services.credentials.verify(credentials.username, credentials.password)
    return LoginResponse(token=services.tokens.issue(user))


@router.get("/health", response_model=Ok)
async def health():
    return Ok()
