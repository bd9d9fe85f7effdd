import logging
from uuid import uuid4

import bcrypt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from pbank.errors import InvalidCredentials, StorageError, UsernameTaken
from pbank.models_DB.users import User_db

logger = logging.getLogger(__name__)

DEFAULT_ROUNDS = 12


def hash_password(plaintext_password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Return a bcrypt hash; salt and cost are encoded in the result."""
    hashed = bcrypt.hashpw(plaintext_password.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def check_password(plaintext_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plaintext_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # malformed stored hash or over-long password
        return False


class CredentialStore:
    """Username/password verification backed by the users table."""

    def __init__(self, session_factory: async_sessionmaker, rounds: int = DEFAULT_ROUNDS):
        self._session_factory = session_factory
        self._rounds = rounds
        self._dummy_hash = hash_password(uuid4().hex, rounds)

    async def verify(self, username: str, plaintext_password: str) -> User_db:
        """
        Return the user whose stored hash matches the password.

        Unknown usernames and wrong passwords both raise InvalidCredentials.
        """
        try:
            async with self._session_factory() as session:
                user = await session.scalar(
                    select(User_db).where(User_db.username == username)
                )
        except SQLAlchemyError as exc:
            logger.exception("Credential lookup failed")
            raise StorageError("Credential lookup failed") from exc

        if user is None:
            # keep timing comparable to a real mismatch
            check_password(plaintext_password, self._dummy_hash)
            logger.warning("Login failed: unknown username")
            raise InvalidCredentials()

        if not check_password(plaintext_password, user.hashed_password):
            logger.warning("Login failed for user %s", user.id)
            raise InvalidCredentials()

        return user

    async def create_user(self, username: str, plaintext_password: str) -> User_db:
        user = User_db(
            id=uuid4(),
            username=username,
            hashed_password=hash_password(plaintext_password, self._rounds),
        )
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    session.add(user)
        except IntegrityError as exc:
            raise UsernameTaken(f"Username {username!r} already exists") from exc
        except SQLAlchemyError as exc:
            logger.exception("Failed to create user")
            raise StorageError("Failed to create user") from exc

        logger.info("Created user %s (%s)", username, user.id)
        return user

    async def get_by_username(self, username: str) -> User_db | None:
        try:
            async with self._session_factory() as session:
                return await session.scalar(
                    select(User_db).where(User_db.username == username)
                )
        except SQLAlchemyError as exc:
            raise StorageError("User lookup failed") from exc

