"""Configuration loading with environment variable substitution."""

import json
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, SecretStr, field_validator

from swift_fs.observability import LogLevel

ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)\}")


def substitute_env_vars(value: Any) -> Any:
    """Recursively substitute ${VAR_NAME} patterns with environment variables."""
    if isinstance(value, str):
        def replace(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(f"Environment variable {var_name} is not set")
            return env_value

        return ENV_VAR_PATTERN.sub(replace, value)
    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]
    return value


class SwiftConnectionConfig(BaseModel):
    """Connection settings for the Swift backend."""

    auth_url: str | None = None
    auth_version: str = "3"
    # Password auth
    user: str | None = None
    key: SecretStr | None = None
    project_name: str | None = None
    project_domain_name: str = "Default"
    user_domain_name: str = "Default"
    # Keystone v3 application credentials
    application_credential_id: str | None = None
    application_credential_secret: SecretStr | None = None
    region_name: str | None = None
    interface: str = "public"
    # Pre-authenticated access
    storage_url: str | None = None
    token: SecretStr | None = None
    retries: int = 5
    timeout: float | None = None


class StoreConfig(BaseModel):
    """Object store backend configuration."""

    backend: str = "swift"  # swift | memory
    container: str
    page_size: int = Field(default=1000, gt=0)
    swift: SwiftConnectionConfig = Field(default_factory=SwiftConnectionConfig)

    def backend_options(self) -> dict[str, Any]:
        """Keyword arguments for the backend constructor."""
        options: dict[str, Any] = {
            "container": self.container,
            "page_size": self.page_size,
        }
        for name, value in self.swift.model_dump(exclude_none=True).items():
            if isinstance(value, SecretStr):
                value = value.get_secret_value()
            options[name] = value
        return options


class AdapterConfig(BaseModel):
    """Filesystem adapter settings."""

    prefix: str = ""
    temp_url_key: SecretStr | None = None
    temp_url_digest: str = "sha256"
    default_visibility: str | None = None
    public_url: str | None = None  # Overrides the store's object URL base

    @field_validator("temp_url_digest")
    @classmethod
    def _known_digest(cls, value: str) -> str:
        if value not in ("sha1", "sha256", "sha512"):
            raise ValueError(f"Unsupported temp URL digest: {value}")
        return value


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: LogLevel = LogLevel.INFO
    format: str = "json"  # json | text


class Config(BaseModel):
    """Main configuration for swift-fs."""

    store: StoreConfig
    adapter: AdapterConfig = Field(default_factory=AdapterConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: str | Path) -> "Config":
        """Load configuration from a YAML or JSON file."""
        path = Path(path)
        with path.open() as f:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)

        # Substitute environment variables
        data = substitute_env_vars(data or {})
        return cls.model_validate(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Load configuration from a dictionary."""
        data = substitute_env_vars(data)
        return cls.model_validate(data)
