"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MIN_JWT_SECRET_LENGTH = 32


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        STOREFRONT_DB_HOST: Database host (default: localhost)
        STOREFRONT_DB_READ_HOST: Replica serving lookups (default: same as host)
        STOREFRONT_DB_PORT: Database port (default: 5432)
        STOREFRONT_DB_DATABASE: Database name (default: storefront)
        STOREFRONT_DB_USERNAME: Database user (default: storefront)
        STOREFRONT_DB_PASSWORD: Database password (required in production)
        STOREFRONT_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        STOREFRONT_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    read_host: str | None = Field(
        default=None,
        description="Replica host for the read engine; the primary when unset",
    )
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="storefront", description="Database name")
    username: str = Field(default="storefront", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )
    echo_sql: bool = Field(default=False, description="Log emitted SQL")

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class TenancySettings(BaseSettings):
    """Hostname-to-tenant resolution and provisioning settings.

    Environment variables:
        STOREFRONT_TENANCY_ROOT_DOMAIN: Platform root domain (default: codeopx.com)
        STOREFRONT_TENANCY_DEV_ROOT_DOMAINS: Roots accepted in development
            (default: ["localhost"])
        STOREFRONT_TENANCY_RESERVED_LABELS: Labels that never resolve to a
            tenant (default: ["www", "localhost"])
        STOREFRONT_TENANCY_BARE_LABELS: Platform surfaces served on the base
            domain when no store owns the label (default: ["admin"])
        STOREFRONT_TENANCY_SUBDOMAIN_MAX_ATTEMPTS: Sequential candidates tried
            when generating a label (default: 20)
        STOREFRONT_TENANCY_SUBDOMAIN_RANDOM_ATTEMPTS: Random-suffix candidates
            tried after the sequential ones (default: 5)
        STOREFRONT_TENANCY_PROVISIONING_MAX_RETRIES: Regenerations after a label
            is lost to a concurrent insert (default: 3)
    """

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_TENANCY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    root_domain: str = Field(
        default="codeopx.com",
        description="Root domain under which tenant subdomains live",
    )
    dev_root_domains: list[str] = Field(
        default_factory=lambda: ["localhost"],
        description="Development roots that also accept {label}.{root} hosts",
    )
    reserved_labels: list[str] = Field(
        default_factory=lambda: ["www", "localhost"],
        description="Labels that never resolve to a tenant",
    )
    bare_labels: list[str] = Field(
        default_factory=lambda: ["admin"],
        description="Unclaimed labels treated as the base domain",
    )
    subdomain_max_attempts: int = Field(default=20, ge=1, le=1000)
    subdomain_random_attempts: int = Field(default=5, ge=0, le=100)
    provisioning_max_retries: int = Field(default=3, ge=0, le=20)

    @field_validator("root_domain")
    @classmethod
    def normalize_root_domain(cls, value: str) -> str:
        """Lowercase the root domain and strip a trailing dot."""
        normalized = value.strip().lower().rstrip(".")
        if not normalized:
            raise ValueError("root_domain must not be empty")
        return normalized

    @field_validator("dev_root_domains", "reserved_labels", "bare_labels")
    @classmethod
    def normalize_names(cls, value: list[str]) -> list[str]:
        """Lowercase configured names and drop blanks."""
        return [v.strip().lower().rstrip(".") for v in value if v.strip()]


class AuthSettings(BaseSettings):
    """Bearer-token verification settings.

    Environment variables:
        STOREFRONT_AUTH_JWT_SECRET: Shared secret used to verify tokens
            (required, at least 32 characters; there is no default)
        STOREFRONT_AUTH_JWT_ALGORITHM: Signing algorithm (default: HS256)
        STOREFRONT_AUTH_ISSUER: Expected issuer claim (optional)
        STOREFRONT_AUTH_AUDIENCE: Expected audience claim (optional)
        STOREFRONT_AUTH_USER_ID_CLAIM: Claim carrying the user id (default: sub)
    """

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    jwt_secret: SecretStr = Field(description="Secret used to verify bearer tokens")
    jwt_algorithm: str = Field(default="HS256", description="JWT algorithm")
    issuer: str | None = Field(default=None, description="Expected issuer")
    audience: str | None = Field(default=None, description="Expected audience")
    user_id_claim: str = Field(default="sub", description="User id claim")

    @field_validator("jwt_secret")
    @classmethod
    def validate_secret_length(cls, value: SecretStr) -> SecretStr:
        """Reject secrets short enough to brute-force."""
        if len(value.get_secret_value()) < MIN_JWT_SECRET_LENGTH:
            raise ValueError(
                f"jwt_secret must be at least {MIN_JWT_SECRET_LENGTH} characters"
            )
        return value


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Storefront API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def tenancy(self) -> TenancySettings:
        """Get tenancy settings."""
        return get_tenancy_settings()

    @property
    def auth(self) -> AuthSettings:
        """Get auth settings."""
        return get_auth_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_tenancy_settings() -> TenancySettings:
    """Get cached tenancy settings."""
    return TenancySettings()


@lru_cache
def get_auth_settings() -> AuthSettings:
    """Get cached auth settings."""
    return AuthSettings()
