# jobboard/config.py

from __future__ import annotations
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal

class Settings(BaseSettings):
    # --- Core ---
    SECRET_KEY: str = Field("change-me", description="JWT signing key")
    ALGORITHM: str = "HS256"
    TOKEN_TTL_SECONDS: int = Field(7 * 24 * 60 * 60, ge=0)
    DEBUG: bool = True  # set False in prod
    LOG_LEVEL: str = "INFO"

    # --- Database ---
    DATABASE_URL: str = Field("sqlite:///./jobboard.db")
    # Alembic reads DATABASE_URL from env as well.

    # --- Auth ---
    # True: every login writes a session row and tokens die with it.
    # False: stateless tokens, the signature is trusted alone.
    AUTH_SESSIONS: bool = True
    # hex_sha256 is the unsalted demo scheme; never use it in prod
    PASSWORD_SCHEME: Literal["bcrypt", "hex_sha256"] = "bcrypt"
    BCRYPT_ROUNDS: int = Field(12, ge=4, le=31)
    MAX_FAILED_LOGINS: int = Field(5, ge=1)
    LOCKOUT_MINUTES: int = Field(15, ge=1)

    # --- HTTP ---
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"])

    # Per-process counter, not shared between workers
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_WINDOW_SECONDS: int = Field(60, ge=1)
    RATE_LIMIT_MAX_REQUESTS: int = Field(100, ge=1)

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
