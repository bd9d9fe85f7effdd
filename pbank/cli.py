"""
Command line helpers: password hashing, seeding and running the server.

    pbank gen-hash [PASSWORD]
    pbank create-user USERNAME PASSWORD
    pbank create-stock SYMBOL PRICE
    pbank seed-demo
    pbank serve
"""
import argparse
import asyncio
import sys

from pbank.config import get_settings
from pbank.db_manager import create_engine, create_schema, create_session_factory
from pbank.errors import PbankError
from pbank.logging_config import setup_logging
from pbank.seed import DEMO_PASSWORD, seed_demo
from pbank.services import build_services
from pbank.services.credentials import hash_password


async def _with_services(settings, action):
    engine = create_engine(settings)
    try:
        if settings.AUTO_CREATE_SCHEMA:
            await create_schema(engine)
        services = build_services(settings, create_session_factory(engine))
        return await action(services)
    finally:
        await engine.dispose()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pbank", description="pbank administration")
    sub = parser.add_subparsers(dest="command", required=True)

    gen_hash = sub.add_parser("gen-hash", help="print a bcrypt hash for a password")
    gen_hash.add_argument("password", nargs="?", default=DEMO_PASSWORD)

    create_user = sub.add_parser("create-user", help="add a user")
    create_user.add_argument("username")
    create_user.add_argument("password")

    create_stock = sub.add_parser("create-stock", help="add a stock")
    create_stock.add_argument("symbol")
    create_stock.add_argument("price")

    sub.add_parser("seed-demo", help="create the admin user and TEST stock")
    sub.add_parser("serve", help="run the API server")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    if args.command == "gen-hash":
        print(hash_password(args.password, settings.BCRYPT_ROUNDS))
        return 0
    if args.command == "serve":
        from pbank.main import run
        run()
        return 0

    try:
        if args.command == "create-user":
            user = asyncio.run(_with_services(
                settings, lambda s: s.credentials.create_user(args.username, args.password)
            ))
            print(user.id)
        elif args.command == "create-stock":
            stock = asyncio.run(_with_services(
                settings, lambda s: s.stocks.create(args.symbol, args.price)
            ))
            print(stock.id)
        elif args.command == "seed-demo":
            user, stock = asyncio.run(_with_services(settings, seed_demo))
            print(f"{user.username} {user.id}")
            print(f"{stock.symbol} {stock.id}")
    except PbankError as exc:
        print(f"error: {exc.code}: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
