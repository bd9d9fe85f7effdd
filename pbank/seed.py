import logging

from pbank.errors import StockNotFound
from pbank.services import Services

logger = logging.getLogger(__name__)

DEMO_USERNAME = "admin"
DEMO_PASSWORD = "fake"
DEMO_SYMBOL = "TEST"
DEMO_PRICE = "42.0"


async def seed_demo(services: Services):
    """Create the demo user and stock unless they already exist."""
    user = await services.credentials.get_by_username(DEMO_USERNAME)
    if user is None:
        user = await services.credentials.create_user(DEMO_USERNAME, DEMO_PASSWORD)

    try:
        stock = await services.stocks.get_by_symbol(DEMO_SYMBOL)
    except StockNotFound:
        stock = await services.stocks.create(DEMO_SYMBOL, DEMO_PRICE)

    logger.info("Demo data ready: user %s, stock %s", user.username, stock.symbol)
    return user, stock
