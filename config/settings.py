# config/settings.py

from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field, model_validator, validator
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Admin Auth"
    DEBUG: bool = False
    ENVIRONMENT: str = Field(default="development", pattern="^(development|staging|production)$")

    # CORS
    CORS_ORIGINS: str = ""

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        if not self.CORS_ORIGINS:
            return ["*"] if self.DEBUG else []
        return [s.strip() for s in self.CORS_ORIGINS.split(",") if s.strip()]

    # Database
    DATABASE_URL: str = "sqlite:///./admin_auth.db"
    DB_POOL_SIZE: int = Field(default=20, ge=5, le=100)
    DB_MAX_OVERFLOW: int = Field(default=30, ge=5, le=100)
    DB_POOL_RECYCLE: int = Field(default=3600, ge=300)

    # Security
    JWT_SECRET: str = Field(min_length=8)
    ALGORITHM: str = "HS256"
    JWT_EXPIRE_HOURS: int = Field(default=24, ge=1, le=24 * 30)
    BCRYPT_ROUNDS: int = Field(default=10, ge=4, le=16)

    # Email
    EMAIL_BACKEND: str = Field(default="smtp", pattern="^(smtp|console)$")
    EMAIL_FROM: str = "no-reply@localhost"
    EMAIL_NAME: str = "Admin Auth"
    EMAIL_HOST: str = "localhost"
    EMAIL_PORT: int = Field(default=587, ge=1, le=65535)
    EMAIL_USER: str = ""
    EMAIL_PASSWORD: str = ""
    EMAIL_USE_TLS: bool = True
    EMAIL_TIMEOUT: int = Field(default=30, ge=5, le=300)

    # OTP
    OTP_EXPIRE_MINUTES: int = Field(default=10, ge=1, le=60)
    OTP_LENGTH: int = Field(default=6, ge=4, le=8)
    OTP_MAX_ATTEMPTS: int = Field(default=5, ge=1, le=20)
    OTP_CLEANUP_ENABLED: bool = True
    OTP_CLEANUP_INTERVAL_MINUTES: int = Field(default=15, ge=1, le=1440)

    # Monitoring
    LOG_LEVEL: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    # Server
    PORT: int = Field(default=8000, ge=1, le=65535)

    @validator('JWT_SECRET')
    def validate_secrets(cls, v):
        """Ensure secrets are strong enough"""
        if len(v) < 8:
            raise ValueError('Secret keys must be at least 8 characters long')
        # Warn if too short for production
        if len(v) < 32:
            import warnings
            warnings.warn(f"Secret key is only {len(v)} characters. Consider using at least 32 characters for production.", UserWarning)
        return v

    @validator('EMAIL_HOST')
    def validate_email_host(cls, v):
        """Validate email host format"""
        if not v or len(v) < 3:
            raise ValueError('Invalid email host')
        return v

    @validator('DATABASE_URL')
    def validate_database_url(cls, v):
        """Validate database URL format"""
        if not v.startswith(('postgresql://', 'postgresql+psycopg2://', 'sqlite://')):
            raise ValueError('Unsupported database URL format')
        return v

    @model_validator(mode='after')
    def validate_cors_origins(self):
        """Validate CORS origins in production"""
        # In production, don't allow wildcard CORS
        if self.ENVIRONMENT == 'production' and ('*' in self.CORS_ORIGINS or not self.CORS_ORIGINS):
            raise ValueError('Wildcard CORS origins not allowed in production')
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.ENVIRONMENT == "production"

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Global settings instance
settings = get_settings()
