"""
Pydantic configuration model for the CircleCI provider.

Validates the client configuration once, at construction time, and
freezes it so no client can observe a change afterwards.
"""

from __future__ import annotations

import os
from typing import Any
from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator, model_validator

DEFAULT_BASE_URL = "https://circleci.com/api/v1.1"


class ProviderConfig(BaseModel):
    """Configuration for the CircleCI API client.

    Values are resolved in order:
    1. Explicit values passed in the config dict.
    2. Environment variables (CIRCLECI_TOKEN, CIRCLECI_VCS_TYPE,
       CIRCLECI_ORGANIZATION, CIRCLECI_BASE_URL).
    3. ``base_url`` falls back to the public v1.1 API; the other fields
       are required.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    token: SecretStr = Field(description="CircleCI personal API token")
    vcs_type: str = Field(description="VCS provider of the projects (e.g. 'github')")
    organization: str = Field(description="Organization or user owning the projects")
    base_url: str = Field(default=DEFAULT_BASE_URL, description="CircleCI API base URL")

    @model_validator(mode="before")
    @classmethod
    def resolve_from_env(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Fall back to environment variables for missing settings."""
        env_map = {
            "token": "CIRCLECI_TOKEN",
            "vcs_type": "CIRCLECI_VCS_TYPE",
            "organization": "CIRCLECI_ORGANIZATION",
            "base_url": "CIRCLECI_BASE_URL",
        }
        values = dict(values)
        for field, env_var in env_map.items():
            if not values.get(field) and os.environ.get(env_var):
                values[field] = os.environ[env_var]
        return values

    @field_validator("vcs_type", "organization")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("token")
    @classmethod
    def token_not_blank(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


def validate_config(config: dict) -> ProviderConfig:
    """Validate and return a typed provider config.

    Args:
        config: Raw configuration dictionary.

    Returns:
        A frozen :class:`ProviderConfig`.

    Raises:
        pydantic.ValidationError: If the config is invalid or incomplete.
    """
    return ProviderConfig(**config)


__all__ = [
    "DEFAULT_BASE_URL",
    "ProviderConfig",
    "validate_config",
]
