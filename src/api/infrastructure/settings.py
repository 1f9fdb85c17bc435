"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Platform database connection settings.

    The platform database holds the tenant directory and the administrator
    accounts. Tenant data lives in separate databases whose credentials are
    stored (encrypted) in the directory.

    Environment variables:
        CROPCO_DB_HOST: Database host (default: localhost)
        CROPCO_DB_PORT: Database port (default: 5432)
        CROPCO_DB_DATABASE: Database name (default: cropco)
        CROPCO_DB_USERNAME: Database user (default: cropco)
        CROPCO_DB_PASSWORD: Database password (required in production)
        CROPCO_DB_POOL_SIZE: Connections kept in the pool (default: 10)
        CROPCO_DB_MAX_OVERFLOW: Extra connections allowed above the pool (default: 0)
    """

    model_config = SettingsConfigDict(
        env_prefix="CROPCO_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port", ge=1, le=65535)
    database: str = Field(default="cropco", description="Database name")
    username: str = Field(default="cropco", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_size: int = Field(
        default=10,
        description="Connections kept in the pool",
        ge=1,
        le=100,
    )
    max_overflow: int = Field(
        default=0,
        description="Extra connections allowed above pool_size",
        ge=0,
        le=100,
    )

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class TenantDatabaseSettings(BaseSettings):
    """Settings applied to every per-tenant database engine.

    Environment variables:
        CROPCO_TENANT_DB_POOL_SIZE: Connections per tenant engine (default: 5)
        CROPCO_TENANT_DB_MAX_OVERFLOW: Overflow per tenant engine (default: 0)
        CROPCO_TENANT_DB_POOL_RECYCLE_SECONDS: Recycle idle connections after (default: 1800)
        CROPCO_TENANT_DB_CONNECT_TIMEOUT_SECONDS: Connect timeout (default: 10)
        CROPCO_TENANT_DB_DATABASE_PREFIX: Prefix of tenant database names (default: cropco_tenant_)
    """

    model_config = SettingsConfigDict(
        env_prefix="CROPCO_TENANT_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    pool_size: int = Field(
        default=5,
        description="Connections kept in each tenant pool",
        ge=1,
        le=50,
    )
    max_overflow: int = Field(
        default=0,
        description="Extra connections allowed above pool_size per tenant",
        ge=0,
        le=50,
    )
    pool_recycle_seconds: int = Field(
        default=1800,
        description="Recycle pooled tenant connections older than this",
        ge=-1,
    )
    connect_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout when opening a tenant connection",
        gt=0,
    )
    database_prefix: str = Field(
        default="cropco_tenant_",
        description="Prefix used when naming a new tenant database",
        min_length=1,
    )


class CipherSettings(BaseSettings):
    """Credential cipher settings.

    Environment variables:
        CROPCO_TENANT_ENCRYPTION_KEY: Deployment secret the tenant database
            passwords are encrypted with (required)
    """

    model_config = SettingsConfigDict(
        env_prefix="CROPCO_TENANT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    encryption_key: SecretStr = Field(
        default=SecretStr(""),
        description="Secret the tenant credential key is derived from",
    )


class AuthSettings(BaseSettings):
    """Token and cookie settings for every principal channel.

    Environment variables:
        CROPCO_AUTH_JWT_SECRET: Shared signing secret (required)
        CROPCO_AUTH_JWT_ALGORITHM: Signing algorithm (default: HS256)
        CROPCO_AUTH_TOKEN_TTL_HOURS: Token lifetime in hours (default: 6)
        CROPCO_AUTH_COOKIE_SECURE: Mark auth cookies Secure (default: true)
        CROPCO_AUTH_COOKIE_SAMESITE: SameSite policy of auth cookies (default: lax)
    """

    model_config = SettingsConfigDict(
        env_prefix="CROPCO_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    jwt_secret: SecretStr = Field(
        default=SecretStr(""),
        description="Secret used to sign and verify principal tokens",
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    token_ttl_hours: int = Field(
        default=6,
        description="Lifetime of issued tokens in hours",
        ge=1,
        le=24 * 30,
    )
    cookie_secure: bool = Field(
        default=True,
        description="Send auth cookies only over HTTPS",
    )
    cookie_samesite: str = Field(
        default="lax",
        description="SameSite attribute of auth cookies (lax, strict or none)",
    )

    @model_validator(mode="after")
    def validate_samesite(self) -> "AuthSettings":
        """Validate the SameSite value."""
        if self.cookie_samesite not in ("lax", "strict", "none"):
            raise ValueError(
                f"cookie_samesite must be lax, strict or none, got "
                f"'{self.cookie_samesite}'"
            )
        return self


class CORSSettings(BaseSettings):
    """CORS settings.

    Environment variables:
        CROPCO_CORS_ORIGINS: Allowed origins (JSON list, default: [])
    """

    model_config = SettingsConfigDict(
        env_prefix="CROPCO_CORS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    origins: list[str] = Field(
        default_factory=list,
        description="Origins allowed to call the API with credentials",
    )

    @property
    def is_enabled(self) -> bool:
        """CORS middleware is installed only when origins are configured."""
        return bool(self.origins)


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Cropco API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings."""
    return DatabaseSettings()


@lru_cache
def get_tenant_database_settings() -> TenantDatabaseSettings:
    """Get cached tenant database engine settings."""
    return TenantDatabaseSettings()


@lru_cache
def get_cipher_settings() -> CipherSettings:
    """Get cached credential cipher settings."""
    return CipherSettings()


@lru_cache
def get_auth_settings() -> AuthSettings:
    """Get cached authentication settings."""
    return AuthSettings()


@lru_cache
def get_cors_settings() -> CORSSettings:
    """Get cached CORS settings."""
    return CORSSettings()
