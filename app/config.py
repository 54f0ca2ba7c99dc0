"""
Centralized configuration management using pydantic-settings.
This module provides a single source of truth for all application configuration.
"""


from dotenv import load_dotenv
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.utils.logger import setup_logger

load_dotenv(override=False)


logger = setup_logger("core_config")

# Only acceptable outside production, see validate_settings
DEV_JWT_SECRET = "dev-secret-key-change-in-prod"


class Settings(BaseSettings):
    """
    Application settings managed by pydantic-settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        env_prefix="",
        populate_by_name=True,
    )

    app_env: str = Field(
        default="development",
        alias="APP_ENV",
        description="Deployment environment: development, test or production",
    )

    # ===== Database Configuration =====
    app_database_url: str = Field(
        default="sqlite+aiosqlite:///./shadow_ledger.db",
        alias="SHADOW_LEDGER_DATABASE_URL",
        description="Async SQLAlchemy URL of the application database",
    )

    database_echo: bool = Field(
        default=False,
        alias="DATABASE_ECHO",
        description="Log every SQL statement issued by the engine",
    )

    # ===== Session Configuration =====
    jwt_secret: str | None = Field(
        default=None,
        alias="JWT_SECRET",
        description="Key used to sign session tokens",
    )

    jwt_algorithm: str = Field(
        default="HS256",
        alias="JWT_ALGORITHM",
        description="Signing algorithm for session tokens",
    )

    session_expire_hours: int = Field(
        default=24,
        alias="SESSION_EXPIRE_HOURS",
        description="Validity window of a session token, in hours",
    )

    session_cookie_name: str = Field(
        default="token",
        alias="SESSION_COOKIE_NAME",
        description="Name of the cookie carrying the session token",
    )

    session_cookie_secure: bool = Field(
        default=True,
        alias="SESSION_COOKIE_SECURE",
        description="Only send the session cookie over HTTPS",
    )

    session_cookie_samesite: str = Field(
        default="none",
        alias="SESSION_COOKIE_SAMESITE",
        description="SameSite policy of the session cookie (none allows embedded use)",
    )

    bcrypt_rounds: int = Field(
        default=12,
        ge=4,
        le=31,
        alias="BCRYPT_ROUNDS",
        description="bcrypt cost factor for password hashing",
    )

    # ===== Server Configuration =====
    server_host: str = Field(
        default="0.0.0.0", alias="SERVER_HOST", description="Server host address"
    )

    server_port: int = Field(
        default=3000, alias="SERVER_PORT", description="Server port number"
    )

    server_workers: int = Field(
        default=1, alias="SERVER_WORKERS", description="Number of uvicorn workers"
    )

    # ===== CORS Configuration =====
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:5173",  # Vite dev server default port
            "http://localhost:3000",
            "http://127.0.0.1:5173",
        ],
        alias="CORS_ALLOW_ORIGINS",
        description="CORS allowed origins",
    )

    cors_allow_credentials: bool = Field(
        default=True,
        alias="CORS_ALLOW_CREDENTIALS",
        description="Whether to allow credentials in CORS requests",
    )

    cors_allow_methods: list[str] = Field(
        default_factory=lambda: ["*"],
        alias="CORS_ALLOW_METHODS",
        description="CORS allowed methods",
    )

    cors_allow_headers: list[str] = Field(
        default_factory=lambda: ["*"],
        alias="CORS_ALLOW_HEADERS",
        description="CORS allowed headers",
    )

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Refuse to run production without a signing key; warn about dev defaults."""

        if not self.jwt_secret:
            if self.is_production:
                raise ValueError(
                    "JWT_SECRET must be set when APP_ENV=production; "
                    "refusing to sign sessions with the development key."
                )
            logger.warning(
                "JWT_SECRET environment variable not set. Using the development key."
            )

        if self.app_database_url.startswith("postgresql://"):
            self.app_database_url = self.app_database_url.replace(
                "postgresql://", "postgresql+asyncpg://", 1
            )

        logger.debug(f"Environment: {self.app_env}")
        return self

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"

    @property
    def signing_key(self) -> str:
        return self.jwt_secret or DEV_JWT_SECRET

    @property
    def session_max_age_seconds(self) -> int:
        return self.session_expire_hours * 60 * 60


# Global settings instance
settings = Settings()
