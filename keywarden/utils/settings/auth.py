from enum import Enum

from pydantic import BaseModel, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class AuthMode(str, Enum):
    """How requests without credentials are treated.

    ``DEV_BYPASS`` is a deployment-time switch only: it synthesizes a default
    tenant for data-plane requests that carry no ``X-Api-Key`` and skips the
    installer check on the key management endpoints.
    """

    ENFORCED = "enforced"
    DEV_BYPASS = "dev_bypass"


class ConfiguredKey(BaseModel):
    """Tenant binding for a statically configured API key."""

    client_id: str
    allowed_databases: list[str] = []


class AuthSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    AUTH_MODE: AuthMode = AuthMode.ENFORCED

    # Shared secret for lifecycle mutations, sent as X-Installer-Key
    INSTALLER_KEY: SecretStr = SecretStr("")

    # Static credential mapping: raw key -> tenant binding (JSON in env)
    API_KEYS: dict[str, ConfiguredKey] = {}

    # Databases reachable by keys issued for each tenant
    TENANT_DATABASES: dict[str, list[str]] = {}

    # Dev bypass tenant
    DEV_DEFAULT_TENANT: str = "dev"
    DEV_DEFAULT_DATABASES: list[str] = []

    BCRYPT_ROUNDS: int = 12

    @property
    def is_dev_bypass(self) -> bool:
        return self.AUTH_MODE == AuthMode.DEV_BYPASS

    def validate_for(self, environment: str) -> None:
        """Refuse configurations that would weaken auth in production."""
        if environment.upper() == "PROD":
            if self.is_dev_bypass:
                raise ValueError("AUTH_MODE=dev_bypass is not allowed in production")
            if not self.INSTALLER_KEY.get_secret_value():
                raise ValueError("INSTALLER_KEY must be set in production")
