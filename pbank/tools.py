from fastapi import Depends, Request
from fastapi.security import APIKeyHeader
from pbank.errors import TokenInvalid
from pbank.services import Services
from pbank.services.tokens import UserIdentity

auth_header = APIKeyHeader(name="Authorization", auto_error=False)


def get_services(request: Request) -> Services:
    return request.app.state.services


async def verify_auth_token(token: str = Depends(auth_header)):
    if not token:
        raise TokenInvalid("Authentication token is missing")
    scheme, _, credentials = token.partition(" ")
    if scheme.lower() != "bearer" or not credentials.strip():
        raise TokenInvalid("Authorization format is 'Bearer <token>'")
    return credentials.strip()


async def fetch_identity(
        token: str = Depends(verify_auth_token),
        services: Services = Depends(get_services)
) -> UserIdentity:
    return services.tokens.validate(token)
