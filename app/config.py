from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PATH = Path(__file__).resolve().parent.parent / ".env.local"


class Settings(BaseSettings):
    # Environment settings
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Supabase settings
    SUPABASE_URL: str
    SUPABASE_JWKS_URL: str | None = None
    SUPABASE_DB_URL: str
    SUPABASE_JWT_SECRET: str | None = None

    # =================================================================
    # BUSINESS TASK ENGINE SETTINGS
    # =================================================================
    # Calendar used for "today", ISO weeks and birthday/anniversary dates
    BUSINESS_TIMEZONE: str = "UTC"

    TASK_DEFAULT_MAX_VISIBLE: int = 10
    TASK_MIN_VISIBLE: int = 4
    TASK_MAX_VISIBLE: int = 15

    # Skip a failing generator (with a warning) instead of failing the whole list
    TASK_GENERATOR_FAIL_SOFT: bool = False

    # Scoring overlays
    TASK_SEASONAL_BOOST_ENABLED: bool = True
    TASK_VIEWED_CAP_ENABLED: bool = True

    DEPOSIT_LOOKAHEAD_DAYS: int = 14
    CONFIRMATION_LOOKAHEAD_HOURS: int = 48

    # =================================================================
    # DATABASE POOL SETTINGS - Simple and configurable
    # =================================================================
    DB_POOL_MIN_SIZE: int = 3
    DB_POOL_MAX_SIZE: int = 12
    DB_POOL_TIMEOUT: float = 30.0
    DB_POOL_MAX_IDLE: float = 600.0  # 10 minutes
    DB_POOL_MAX_LIFETIME: float = 3600.0  # 1 hour

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # derive sensible defaults if not provided
    def jwks_url(self) -> str:
        if self.SUPABASE_JWKS_URL:
            return self.SUPABASE_JWKS_URL
        base = self.SUPABASE_URL.rstrip("/")
        return f"{base}/auth/v1/.well-known/jwks.json"

    def get_db_pool_config(self) -> dict:
        """
        Get database pool configuration.
        Adjust environment-specific settings based on self.environment.
        """
        config = {
            "min_size": self.DB_POOL_MIN_SIZE,
            "max_size": self.DB_POOL_MAX_SIZE,
            "timeout": self.DB_POOL_TIMEOUT,
            "max_idle": self.DB_POOL_MAX_IDLE,
            "max_lifetime": self.DB_POOL_MAX_LIFETIME,
        }

        if self.environment == "development":
            # The nine task generators fan out concurrently, keep enough headroom
            config.update(
                {
                    "min_size": 2,
                    "max_size": 10,
                    "timeout": 15.0,
                }
            )

        return config


settings = Settings()
