import asyncio
from types import SimpleNamespace

import pytest

from pbank.config import Settings
from pbank.db_manager import create_engine, create_schema, create_session_factory
from pbank.seed import seed_demo
from pbank.services import build_services

TEST_SECRET = "test-secret-0123456789abcdef0123456789"


@pytest.fixture
def settings(tmp_path):
    """Throwaway SQLite database, fake secret and cheap bcrypt cost"""
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'pbank.db'}",
        JWT_SECRET=TEST_SECRET,
        BCRYPT_ROUNDS=4,
        ACCESS_TOKEN_EXPIRE_MINUTES=5,
        AUTO_CREATE_SCHEMA=True,
        SEED_DEMO=False,
    )


@pytest.fixture
def run_bank(settings):
    """
    Run an async scenario against a freshly seeded bank.

    Everything (engine, services, scenario) lives inside a single event loop,
    the scenario receives a namespace with `services`, `admin` and `stock`.
    """
    def run(scenario):
        async def main():
            engine = create_engine(settings)
            try:
                await create_schema(engine)
                services = build_services(settings, create_session_factory(engine))
                admin, stock = await seed_demo(services)
                bank = SimpleNamespace(services=services, admin=admin, stock=stock)
                return await scenario(bank)
            finally:
                await engine.dispose()

        return asyncio.run(main())

    return run
