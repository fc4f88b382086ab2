import os
from functools import lru_cache

from dotenv import load_dotenv, find_dotenv

_env_path = find_dotenv(usecwd=True)
if _env_path:
    load_dotenv(_env_path, override=True)


class Settings:
    # SQLite keeps local runs dependency free; production points this at Postgres
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./cartify.db")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    # Comma separated list of allowed frontend origins
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")
    PORT: int = int(os.getenv("PORT", "8000"))

    @property
    def cors_origins(self):
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings():
    return Settings()
