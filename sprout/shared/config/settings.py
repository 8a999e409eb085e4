# 📄 File: sprout/shared/config/settings.py
#
# 🧭 Purpose (Layman Explanation):
# The main configuration center that reads all settings from environment variables
# and hands them to the rest of the Sprout marketplace in one organized place.
#
# 🧪 Purpose (Technical Summary):
# Pydantic-based settings management with environment variable loading,
# validation, and type safety for every application configuration parameter,
# including the optional payment, email, shipping and storage providers.
#
# 🔗 Dependencies:
# - pydantic-settings for configuration management
# - python-dotenv for .env file loading
# - typing for type hints
#
# 🔄 Connected Modules / Calls From:
# - sprout.main (application startup)
# - Database connection modules
# - Stripe, Mailjet, Shippo and Supabase clients
# - All modules requiring configuration

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety. Settings are loaded
    from environment variables with fallback to .env file. Every external
    provider key is optional: the matching feature reports itself as not
    configured instead of preventing startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================

    APP_NAME: str = Field(default="Sprout Marketplace API", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    APP_DESCRIPTION: str = Field(
        default="Plant marketplace, trading and community platform",
        description="Application description"
    )
    ENVIRONMENT: str = Field(default="development", description="Runtime environment")
    DEBUG: bool = Field(default=True, description="Debug mode flag")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(default="json", description="Log output format (json/text)")

    # =========================================================================
    # SERVER CONFIGURATION
    # =========================================================================

    HOST: str = Field(default="0.0.0.0", description="Server host")
    PORT: int = Field(default=8000, description="Server port")
    RELOAD: bool = Field(default=True, description="Auto-reload on changes")
    WORKERS: int = Field(default=1, description="Number of worker processes")

    # =========================================================================
    # DATABASE CONFIGURATION
    # =========================================================================

    DATABASE_URL: Optional[str] = Field(None, description="Async SQLAlchemy connection URL")
    DB_HOST: str = Field(default="localhost", description="Database host")
    DB_PORT: int = Field(default=5432, description="Database port")
    DB_NAME: str = Field(default="sprout_db", description="Database name")
    DB_USER: str = Field(default="postgres", description="Database user")
    DB_PASSWORD: str = Field(default="", description="Database password")

    # Connection Pool Settings
    DB_POOL_SIZE: int = Field(default=10, description="Database pool size")
    DB_MAX_OVERFLOW: int = Field(default=20, description="Database pool overflow")
    DB_POOL_TIMEOUT: int = Field(default=30, description="Database pool timeout")
    DB_POOL_RECYCLE: int = Field(default=3600, description="Database pool recycle time")

    # =========================================================================
    # REDIS / CELERY
    # =========================================================================

    REDIS_URL: str = Field(default="redis://localhost:6379/0", description="Redis URL")
    CELERY_BROKER_URL: str = Field(
        default="redis://localhost:6379/1",
        description="Celery broker URL"
    )
    CELERY_RESULT_BACKEND: str = Field(
        default="redis://localhost:6379/2",
        description="Celery result backend URL"
    )

    # =========================================================================
    # SECURITY SETTINGS
    # =========================================================================

    # Supabase issues the access tokens, we only verify them
    SUPABASE_JWT_SECRET: str = Field(default="", description="Supabase JWT signing secret")
    JWT_ALGORITHM: str = Field(default="HS256", description="JWT algorithm")
    JWT_AUDIENCE: str = Field(default="authenticated", description="Expected JWT audience")

    # CORS Settings
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000,http://localhost:9002",
        description="CORS allowed origins"
    )
    CORS_ALLOW_CREDENTIALS: bool = Field(default=True, description="CORS allow credentials")

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = Field(default=True, description="Enable slowapi rate limits")
    CONTACT_RATE_LIMIT: str = Field(default="5/minute", description="Contact form rate limit")
    CHECKOUT_RATE_LIMIT: str = Field(default="10/minute", description="Checkout rate limit")

    # =========================================================================
    # SUPABASE SERVICES
    # =========================================================================

    SUPABASE_URL: Optional[str] = Field(None, description="Supabase project URL")
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = Field(None, description="Supabase service role key")
    SUPABASE_STORAGE_BUCKET: str = Field(
        default="sprout-images",
        description="Supabase storage bucket"
    )
    MAX_IMAGE_SIZE: int = Field(default=5242880, description="Max image size (5MB)")
    IMAGE_QUALITY: int = Field(default=85, description="Image compression quality")

    # =========================================================================
    # PAYMENTS (STRIPE)
    # =========================================================================

    STRIPE_SECRET_KEY: Optional[str] = Field(None, description="Stripe secret key")
    STRIPE_API_VERSION: Optional[str] = Field(None, description="Pinned Stripe API version")
    STRIPE_CHECKOUT_WEBHOOK_SECRET: Optional[str] = Field(
        None, description="Signing secret of the checkout/subscription webhook"
    )
    STRIPE_CONNECT_WEBHOOK_SECRET: Optional[str] = Field(
        None, description="Signing secret of the Connect account webhook"
    )
    STRIPE_PRO_PRICE_ID: Optional[str] = Field(None, description="Price id of the Pro plan")
    STRIPE_CONNECT_REFRESH_URL: Optional[str] = Field(None, description="Connect onboarding refresh URL")
    STRIPE_CONNECT_RETURN_URL: Optional[str] = Field(None, description="Connect onboarding return URL")
    CHECKOUT_CURRENCY: str = Field(default="usd", description="Checkout currency")

    # =========================================================================
    # EMAIL (MAILJET)
    # =========================================================================

    MAILJET_API_KEY: Optional[str] = Field(None, description="Mailjet API key")
    MAILJET_SECRET_KEY: Optional[str] = Field(None, description="Mailjet secret key")
    MAILJET_API_URL: str = Field(default="https://api.mailjet.com", description="Mailjet API URL")
    CONTACT_FORM_RECEIVER_EMAIL: Optional[str] = Field(
        None, description="Mailbox receiving contact form messages"
    )

    # =========================================================================
    # SHIPPING (SHIPPO)
    # =========================================================================

    SHIPPO_API_KEY: Optional[str] = Field(None, description="Shippo API token")
    SHIPPO_API_URL: str = Field(default="https://api.goshippo.com", description="Shippo API URL")
    SHIPPO_PREFERRED_PROVIDER: str = Field(default="USPS", description="Preferred carrier")
    SHIPPO_PREFERRED_SERVICE: str = Field(default="usps_priority", description="Preferred service level")

    # =========================================================================
    # MARKETPLACE RULES
    # =========================================================================

    FEATURED_LISTING_DAYS: int = Field(default=7, description="Length of a listing feature")
    PRO_SUBSCRIPTION_DAYS: int = Field(default=30, description="Length of a Pro period")
    DEFAULT_PAGE_SIZE: int = Field(default=10, description="Default catalog page size")

    REWARD_POINTS_LISTING: int = Field(default=10, description="Points for creating a listing")
    REWARD_POINTS_PURCHASE: int = Field(default=20, description="Points for completing a purchase")
    REWARD_POINTS_SALE: int = Field(default=25, description="Points for selling a plant")
    REWARD_POINTS_POST: int = Field(default=5, description="Points for a forum post")
    REWARD_POINTS_COMMENT: int = Field(default=2, description="Points for a comment")

    # =========================================================================
    # VALIDATORS
    # =========================================================================

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed_environments = ["development", "staging", "production", "test"]
        if v.lower() not in allowed_environments:
            raise ValueError(f"Environment must be one of {allowed_environments}")
        return v.lower()

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level value."""
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed_levels:
            raise ValueError(f"Log level must be one of {allowed_levels}")
        return v.upper()

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v.lower() not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v.lower()

    @field_validator("JWT_ALGORITHM")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        """Validate JWT algorithm."""
        allowed_algorithms = ["HS256", "HS384", "HS512"]
        if v not in allowed_algorithms:
            raise ValueError(f"JWT algorithm must be one of {allowed_algorithms}")
        return v

    @field_validator("CORS_ORIGINS")
    @classmethod
    def validate_cors_origins(cls, v: str) -> str:
        """Validate CORS origins format."""
        origins = [origin.strip() for origin in v.split(",")]
        for origin in origins:
            if not origin.startswith(("http://", "https://", "*")):
                raise ValueError(f"Invalid CORS origin format: {origin}")
        return v

    @field_validator("CHECKOUT_CURRENCY")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        if len(v) != 3 or not v.isalpha():
            raise ValueError("Checkout currency must be a 3-letter ISO code")
        return v.lower()

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================

    @property
    def database_url(self) -> str:
        """Get the database URL, preferring explicit DATABASE_URL."""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        return (
            f"postgresql+asyncpg://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in test environment."""
        return self.ENVIRONMENT == "test"

    @property
    def stripe_enabled(self) -> bool:
        return bool(self.STRIPE_SECRET_KEY)

    @property
    def mailjet_enabled(self) -> bool:
        return bool(
            self.MAILJET_API_KEY and self.MAILJET_SECRET_KEY and self.CONTACT_FORM_RECEIVER_EMAIL
        )

    @property
    def shippo_enabled(self) -> bool:
        return bool(self.SHIPPO_API_KEY)

    @property
    def storage_enabled(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_SERVICE_ROLE_KEY)

    @property
    def debug(self) -> bool:
        """Alias for DEBUG to allow access as settings.debug"""
        return self.DEBUG


# ============================================================================
# SETTINGS FACTORY
# ============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Uses lru_cache to ensure settings are loaded only once
    and reused throughout the application lifecycle.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
