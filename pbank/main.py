import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import uvicorn

from pbank.config import Settings, get_settings
from pbank.db_manager import create_engine, create_schema, create_session_factory
from pbank.errors import AuthError, PbankError
from pbank.logging_config import safe_database_target, setup_logging
from pbank.routers.public_router import router as public_router
from pbank.routers.stock_router import router as stock_router
from pbank.routers.order_router import router as order_router
from pbank.routers.transaction_router import router as transaction_router
from pbank.routers.holdings_router import router as holdings_router
from pbank.seed import seed_demo
from pbank.services import build_services

logger = logging.getLogger(__name__)


async def handle_domain_error(request: Request, exc: PbankError):
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": exc.code, "detail": exc.public_detail},
        headers=headers,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.LOG_LEVEL)
        logger.info("Server is using database: %s", safe_database_target(settings.DATABASE_URL))
        if settings.uses_default_secret:
            logger.warning("JWT_SECRET is not set; using the development default")

        engine = create_engine(settings)
        if settings.AUTO_CREATE_SCHEMA:
            await create_schema(engine)
        app.state.services = build_services(settings, create_session_factory(engine))
        if settings.SEED_DEMO:
            await seed_demo(app.state.services)
        try:
            yield
        finally:
            await engine.dispose()

    app = FastAPI(title="pbank", lifespan=lifespan)
    app.add_exception_handler(PbankError, handle_domain_error)

    app.include_router(public_router, prefix='/api/v1')
    app.include_router(stock_router, prefix='/api/v1')
    app.include_router(order_router, prefix='/api/v1')
    app.include_router(transaction_router, prefix='/api/v1')
    app.include_router(holdings_router, prefix='/api/v1')
    return app


app = create_app()


def run():
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    uvicorn.run(create_app(settings), host=settings.SERVER_HOST, port=settings.SERVER_PORT)


if __name__ == "__main__":
    run()
