"""Application configuration loaded from .env and the seed data file."""

import os
from functools import lru_cache
from pathlib import Path

import yaml
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent

STORE_BACKENDS = ("sql", "hosted")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    # Store selection: "sql" (embedded/SQLAlchemy) or "hosted" (PostgREST service)
    STORE_BACKEND: str = os.getenv("STORE_BACKEND", "sql").strip().lower()

    # SQL store
    SQLITE_PATH: str = os.getenv("SQLITE_PATH", str(BASE_DIR / "schedule.db"))
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")

    # Hosted store
    HOSTED_URL: str = os.getenv("HOSTED_URL", "")
    HOSTED_KEY: str = os.getenv("HOSTED_KEY", "")
    HOSTED_TIMEOUT: float = float(os.getenv("HOSTED_TIMEOUT", "10"))

    # Access tokens
    JWT_SECRET: str = os.getenv("JWT_SECRET", "change-me-in-production")
    TOKEN_EXPIRE_HOURS: int = int(os.getenv("TOKEN_EXPIRE_HOURS", "24"))

    # Server
    API_PREFIX: str = os.getenv("API_PREFIX", "/api")
    ALLOWED_ORIGINS: str = os.getenv("ALLOWED_ORIGINS", "*")
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:3000")
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "3000"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # External identity (Google OAuth)
    GOOGLE_CLIENT_ID: str = os.getenv("GOOGLE_CLIENT_ID", "")
    GOOGLE_CLIENT_SECRET: str = os.getenv("GOOGLE_CLIENT_SECRET", "")
    OAUTH_CALLBACK_URL: str = os.getenv(
        "OAUTH_CALLBACK_URL", "http://localhost:3000/api/auth/external/callback"
    )

    # Demo data
    SEED_DEMO_DATA: bool = _env_bool("SEED_DEMO_DATA", "true")
    SEED_FILE: str = os.getenv("SEED_FILE", str(BASE_DIR / "config" / "seed.yaml"))

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"sqlite+aiosqlite:///{self.SQLITE_PATH}"

    @property
    def hosted_rest_url(self) -> str:
        return f"{self.HOSTED_URL.rstrip('/')}/rest/v1"

    @property
    def allowed_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    @property
    def external_auth_enabled(self) -> bool:
        return bool(self.GOOGLE_CLIENT_ID and self.GOOGLE_CLIENT_SECRET)


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    if settings.STORE_BACKEND not in STORE_BACKENDS:
        raise ValueError(
            f"STORE_BACKEND must be one of {STORE_BACKENDS}, got {settings.STORE_BACKEND!r}"
        )
    return settings


def load_seed_data(path: str | None = None) -> dict:
    """Load demo staff and schedules from the YAML seed file.

    Returns ``{"staff": [...]}`` where each staff item may carry a
    ``schedules`` list. A missing file yields an empty seed.
    """
    seed_file = Path(path or get_settings().SEED_FILE)
    if not seed_file.exists():
        return {"staff": []}
    with open(seed_file, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    data.setdefault("staff", [])
    return data
