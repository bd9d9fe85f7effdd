from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_JWT_SECRET = "secretkey"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./pbank.db"
    DB_ECHO: bool = False
    AUTO_CREATE_SCHEMA: bool = True
    SEED_DEMO: bool = False

    # Security
    # JWT_SECRET must be overridden outside local development
    JWT_SECRET: str = DEFAULT_JWT_SECRET
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    BCRYPT_ROUNDS: int = 12

    # Server
    SERVER_HOST: str = "127.0.0.1"
    SERVER_PORT: int = 8080
    LOG_LEVEL: str = "INFO"

    @property
    def uses_default_secret(self) -> bool:
        return self.JWT_SECRET == DEFAULT_JWT_SECRET


@lru_cache
def get_settings() -> Settings:
    return Settings()
