"""
Core configuration for AwareGuard Backend
Scam-awareness learning platform
"""

import secrets
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # Application Settings
    APP_NAME: str = "AwareGuard"
    APP_VERSION: str = "1.0.0"
    APP_DESCRIPTION: str = "Scam-awareness learning platform backend"
    ENVIRONMENT: str = Field(default="development")
    DEBUG: bool = Field(default=False)

    # API Settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "AwareGuard Backend"
    FRONTEND_URL: str = Field(default="http://localhost:5173")

    # Security
    SECRET_KEY: str = Field(default_factory=lambda: secrets.token_urlsafe(32))
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days
    ALGORITHM: str = "HS256"
    BCRYPT_ROUNDS: int = 10
    PASSWORD_MIN_LENGTH: int = 6
    PASSWORD_RESET_EXPIRE_MINUTES: int = 60

    # Database
    DATABASE_URL: Optional[str] = Field(default=None)

    # Redis Cache
    REDIS_ENABLED: bool = Field(default=False)
    REDIS_URL: Optional[str] = Field(default=None)
    REDIS_HOST: str = Field(default="localhost")
    REDIS_PORT: int = Field(default=6379)
    REDIS_DB: int = Field(default=0)
    REDIS_CACHE_TTL: int = Field(default=300)  # 5 minutes
    LEADERBOARD_CACHE_TTL: int = Field(default=60)

    # CORS
    BACKEND_CORS_ORIGINS: str = Field(default="http://localhost:3000,http://localhost:5173")
    SECURITY_HEADERS_ENABLED: bool = Field(default=True)

    # Email (Resend)
    EMAILS_ENABLED: bool = Field(default=True)
    RESEND_API_KEY: Optional[str] = Field(default=None)
    RESEND_API_URL: str = Field(default="https://api.resend.com/emails")
    EMAIL_FROM: str = Field(default="AwareGuard <noreply@awareguard.me>")
    ADMIN_EMAIL: Optional[str] = Field(default=None)

    # Payments (Paystack)
    PAYSTACK_SECRET_KEY: str = Field(default="")
    PAYSTACK_PUBLIC_KEY: Optional[str] = Field(default=None)
    PAYSTACK_BASE_URL: str = Field(default="https://api.paystack.co")
    MONTHLY_PLAN_AMOUNT: int = Field(default=9999)  # NGN
    ANNUAL_PLAN_AMOUNT: int = Field(default=99999)  # NGN

    # Scam-awareness assistant (OpenRouter)
    OPENROUTER_API_KEY: Optional[str] = Field(default=None)
    OPENROUTER_API_URL: str = Field(default="https://openrouter.ai/api/v1/chat/completions")
    ASSISTANT_MODEL: str = Field(default="openai/gpt-4o")
    ASSISTANT_RATE_LIMIT: str = Field(default="30/hour")

    # Sentry
    SENTRY_DSN: Optional[str] = Field(default=None)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    LOG_FILE: Optional[str] = Field(default=None)
    LOG_MAX_BYTES: int = Field(default=10485760)
    LOG_BACKUP_COUNT: int = Field(default=5)

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = Field(default=True)
    CONTACT_RATE_LIMIT: str = Field(default="5/hour")

    # Learning rules
    QUIZ_PASS_THRESHOLD: int = Field(default=70)
    QUIZ_PASS_XP: int = Field(default=15)
    QUIZ_TIME_LIMIT_SECONDS: int = Field(default=1800)
    XP_PER_LEVEL: int = Field(default=500)
    LEADERBOARD_DEFAULT_LIMIT: int = Field(default=50)
    LEADERBOARD_MAX_LIMIT: int = Field(default=100)

    def get_database_url(self) -> str:
        """Get database URL with proper formatting"""
        if self.DATABASE_URL:
            # Handle Render's postgres:// URLs
            db_url = self.DATABASE_URL
            if db_url.startswith("postgres://"):
                db_url = db_url.replace("postgres://", "postgresql://", 1)
            return db_url

        # Default for development
        return "sqlite:///./awareguard.db"

    def get_redis_url(self) -> str:
        """Get Redis URL"""
        if self.REDIS_URL:
            return self.REDIS_URL
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    def get_cors_origins(self) -> list[str]:
        """Get CORS origins as list"""
        if self.BACKEND_CORS_ORIGINS:
            return [origin.strip() for origin in self.BACKEND_CORS_ORIGINS.split(",")]
        return ["http://localhost:3000", "http://localhost:5173"]

    def plan_amount(self, plan: str) -> Optional[int]:
        """Price of a subscription plan in NGN"""
        return {"monthly": self.MONTHLY_PLAN_AMOUNT, "annual": self.ANNUAL_PLAN_AMOUNT}.get(plan)

    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


settings = Settings()
