from typing import List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # FastAPI Configuration
    PROJECT_NAME: str = "PLM Server"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # Server Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # JWT Configuration
    JWT_ENABLED: bool = Field(
        default=True,
        description="Issue a signed token in the 'jwt' response header on login/account creation",
    )
    JWT_SECRET_KEY: str = Field(
        ...,
        description="Secret key for JWT tokens - must be cryptographically secure (min 32 chars)",
    )
    JWT_ALGORITHM: str = "HS256"

    @field_validator("JWT_SECRET_KEY")
    @classmethod
    def validate_jwt_secret_key(cls, v: str) -> str:
        """Validate JWT secret key has minimum length for security."""
        if len(v) < 32:
            raise ValueError(
                "JWT_SECRET_KEY must be at least 32 characters long for security. "
                'Generate a secure key with: python -c "import secrets; print(secrets.token_hex(32))"'
            )
        return v

    JWT_EXPIRE_MINUTES: int = Field(
        default=120,
        description="Lifetime of issued JWT tokens in minutes",
    )

    # Basic authentication (Authorization: Basic) on REST calls
    BASIC_AUTH_ENABLED: bool = True

    # Session Configuration
    SESSION_AUTH_ENABLED: bool = True
    SESSION_COOKIE_NAME: str = "PLMSESSIONID"
    SESSION_DURATION_HOURS: int = Field(
        default=2,
        description="Server-side HTTP session duration in hours",
    )
    SESSION_COOKIE_SECURE: bool = False
    SESSION_CLEANUP_INTERVAL_MINUTES: int = Field(
        default=15,
        description="Minimum delay between sweeps of expired sessions",
    )

    # Account registration
    ACCOUNT_REGISTRATION_STRATEGY: str = Field(
        default="open",
        description="'open' enables new accounts immediately, 'admin_validation' leaves them disabled",
    )

    @field_validator("ACCOUNT_REGISTRATION_STRATEGY")
    @classmethod
    def validate_registration_strategy(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("open", "admin_validation"):
            raise ValueError(
                "ACCOUNT_REGISTRATION_STRATEGY must be 'open' or 'admin_validation'"
            )
        return v

    DEFAULT_LANGUAGE: str = "en"
    DEFAULT_TIMEZONE: str = "UTC"

    # Bootstrap administrator (created at startup when both are set)
    ADMIN_LOGIN: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None
    ADMIN_EMAIL: str = "admin@localhost"

    # PostgreSQL Configuration
    DATABASE_ENABLED: bool = True
    DATABASE_URL: Optional[str] = None  # Full connection URL (for local dev/tests)
    DATABASE_NAME: str = "plm"
    DATABASE_USER: str = "postgres"
    DATABASE_PASSWORD: str = ""
    DATABASE_HOST: str = "localhost"
    DATABASE_PORT: int = 5432

    # Connection Pool Settings
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800  # 30 minutes
    DB_ECHO: bool = False  # SQL query logging

    # Elasticsearch indexer configuration
    ELASTICSEARCH_NUMBER_OF_SHARDS: Optional[str] = "1"
    ELASTICSEARCH_NUMBER_OF_REPLICAS: Optional[str] = "1"
    ELASTICSEARCH_AUTO_EXPAND_REPLICAS: Optional[str] = "0-1"
    ELASTICSEARCH_SERVER_URI: Optional[str] = "http://localhost:9200"
    ELASTICSEARCH_USERNAME: Optional[str] = None
    ELASTICSEARCH_PASSWORD: Optional[str] = None
    ELASTICSEARCH_AWS_SERVICE: Optional[str] = None
    ELASTICSEARCH_AWS_REGION: Optional[str] = None
    ELASTICSEARCH_AWS_ACCESS_KEY: Optional[str] = None
    ELASTICSEARCH_AWS_SECRET_KEY: Optional[str] = None

    # CORS Settings
    CORS_ORIGINS: List[str] = [
        "http://localhost:8080",
        "http://127.0.0.1:8080",
    ]
    ADDITIONAL_CORS_ORIGINS: Optional[str] = None
    CORS_CREDENTIALS: bool = True
    CORS_METHODS: List[str] = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    CORS_HEADERS: List[str] = [
        "Authorization",
        "Content-Type",
        "Accept",
        "Accept-Language",
        "Origin",
        "X-Requested-With",
    ]
    CORS_EXPOSE_HEADERS: List[str] = ["jwt", "X-Process-Time"]

    ALLOWED_HOST_PATTERNS: List[str] = ["localhost", "127.0.0.1"]

    # Logging Configuration
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # json or text

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def resolved_cors_origins(self) -> List[str]:
        """Get CORS origins based on environment and configuration."""
        import json

        # In production, do NOT start with localhost defaults
        origins = [] if self.is_production else list(self.CORS_ORIGINS)

        if self.ADDITIONAL_CORS_ORIGINS:
            try:
                if self.ADDITIONAL_CORS_ORIGINS.startswith("["):
                    origins.extend(json.loads(self.ADDITIONAL_CORS_ORIGINS))
                else:
                    origins.extend(
                        origin.strip()
                        for origin in self.ADDITIONAL_CORS_ORIGINS.split(",")
                    )
            except (json.JSONDecodeError, ValueError):
                origins.append(self.ADDITIONAL_CORS_ORIGINS)

        # Remove duplicates while preserving order
        seen = set()
        unique_origins = []
        for origin in origins:
            if origin and origin not in seen:
                seen.add(origin)
                unique_origins.append(origin)

        return unique_origins

    @property
    def is_development(self) -> bool:
        """Check if the application is running in development mode."""
        return self.ENVIRONMENT.lower() in ["development", "dev", "local"]

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production mode."""
        return self.ENVIRONMENT.lower() in ["production", "prod"]

    @property
    def accounts_enabled_on_creation(self) -> bool:
        """New accounts are enabled immediately under the open registration strategy."""
        return self.ACCOUNT_REGISTRATION_STRATEGY == "open"

    @property
    def elasticsearch_properties(self) -> dict:
        """Elasticsearch configuration as a properties bag (unset keys omitted)."""
        properties = {
            "number_of_shards": self.ELASTICSEARCH_NUMBER_OF_SHARDS,
            "number_of_replicas": self.ELASTICSEARCH_NUMBER_OF_REPLICAS,
            "auto_expand_replicas": self.ELASTICSEARCH_AUTO_EXPAND_REPLICAS,
            "serverUri": self.ELASTICSEARCH_SERVER_URI,
            "username": self.ELASTICSEARCH_USERNAME,
            "password": self.ELASTICSEARCH_PASSWORD,
            "awsService": self.ELASTICSEARCH_AWS_SERVICE,
            "awsRegion": self.ELASTICSEARCH_AWS_REGION,
            "awsAccessKey": self.ELASTICSEARCH_AWS_ACCESS_KEY,
            "awsSecretKey": self.ELASTICSEARCH_AWS_SECRET_KEY,
        }
        return {key: value for key, value in properties.items() if value is not None}


# Global settings instance
settings = Settings()
