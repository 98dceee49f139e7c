"""``circleci_environment_variable`` resource.

CircleCI never returns a variable's value once it is set, so the
record keeps a SHA-256 fingerprint of the value instead of the value
itself. The fingerprint is the only signal a host engine has to detect
that the desired value changed, which then forces a replacement.
"""

from __future__ import annotations

import base64
import hashlib
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SecretStr, model_validator

from circleci_provider.base.exceptions import CircleCIError, ConflictError, ValidationError
from circleci_provider.base.logger import cp_logger
from circleci_provider.base.resource import Attribute, ResourceBlueprint
from circleci_provider.client import CircleCIClient, validate_environment_variable_name

NAME_DOCS_URL = (
    "https://circleci.com/docs/2.0/env-vars/#injecting-environment-variables-with-the-api"
)


def fingerprint(value: str) -> str:
    """Return the base64-encoded SHA-256 digest of *value*."""
    digest = hashlib.sha256(value.encode("utf-8")).digest()
    return base64.b64encode(digest).decode("ascii")


class EnvironmentVariableState(BaseModel):
    """Host-engine record for one environment variable.

    ``value`` holds the plaintext only between planning and creation; it is
    excluded from :meth:`state` and masked in ``repr``. ``value_fingerprint``
    is derived from it and is what gets persisted.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    id: str = ""
    project: str = ""
    name: str = ""
    value: SecretStr | None = Field(default=None, exclude=True)
    value_fingerprint: str = ""

    @model_validator(mode="before")
    @classmethod
    def derive_fingerprint(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Replace any stored fingerprint with the one of a supplied plaintext."""
        value = values.get("value")
        if isinstance(value, SecretStr):
            value = value.get_secret_value()
        if value is not None:
            values = {**values, "value_fingerprint": fingerprint(value)}
        return values

    def __setattr__(self, name: str, value: Any) -> None:
        super().__setattr__(name, value)
        if name == "value" and self.value is not None:
            # Set directly so a new plaintext always wins over a stale fingerprint.
            self.__dict__["value_fingerprint"] = fingerprint(self.value.get_secret_value())

    @property
    def present(self) -> bool:
        return bool(self.id)

    def state(self) -> dict[str, Any]:
        """Return the persistable state; never contains the plaintext."""
        return self.model_dump()


class EnvironmentVariableResource(ResourceBlueprint[EnvironmentVariableState]):
    """Lifecycle adapter mapping create/read/delete/exists/import onto the API.

    Attributes:
        client: CircleCI API client shared by every record.
    """

    schema = {
        "project": Attribute(
            description="The name of the CircleCI project to create the variable in",
            required=True,
            force_new=True,
        ),
        "name": Attribute(
            description="The name of the environment variable",
            required=True,
            force_new=True,
        ),
        "value": Attribute(
            description="The value of the environment variable",
            required=True,
            force_new=True,
            sensitive=True,
            state_key="value_fingerprint",
        ),
    }
    timeouts = {"create": 300.0, "delete": 300.0}

    def __init__(self, client: CircleCIClient):
        self.client = client

    def _lookup_name(self, record: EnvironmentVariableState) -> str:
        return record.name or record.id

    def validate(self, record: EnvironmentVariableState) -> None:
        """Check a record before anything is sent to CircleCI.

        Raises:
            ValidationError: If the project is missing or the name is
                not a valid CircleCI variable name.
        """
        if not record.project:
            raise ValidationError("project is required")
        if not validate_environment_variable_name(record.name):
            raise ValidationError(
                f"environment variable name {record.name} is not valid. See {NAME_DOCS_URL}"
            )

    def create(self, record: EnvironmentVariableState) -> None:
        """Create the variable, refusing to adopt one created out of band.

        Raises:
            ValidationError: If the record is invalid or has no value.
            ConflictError: If the variable already exists.
            ClientError: If any API call fails.
        """
        self.validate(record)
        if record.value is None:
            raise ValidationError(
                f"value is required to create environment variable {record.name}"
            )
        project, name = record.project, record.name
        log_ctx = {"project": project, "resource": name, "operation": "create"}

        try:
            if self.client.environment_variable_exists(project, name):
                raise ConflictError(project, name)
            self.client.add_environment_variable(
                project, name, record.value.get_secret_value()
            )
        except CircleCIError as e:
            cp_logger.error(f"Creating environment variable failed: {e}", **log_ctx)
            raise

        record.id = name
        record.value = None
        cp_logger.info("Environment variable created", **log_ctx)
        self.read(record)

    def read(self, record: EnvironmentVariableState) -> None:
        """Refresh the name from CircleCI; the fingerprint is left untouched."""
        name = self._lookup_name(record)
        envvar = self.client.get_environment_variable(record.project, name)
        record.name = envvar.name

    def delete(self, record: EnvironmentVariableState) -> None:
        """Delete the variable and mark the record absent."""
        name = self._lookup_name(record)
        try:
            self.client.delete_environment_variable(record.project, name)
        except CircleCIError as e:
            cp_logger.error(
                f"Deleting environment variable failed: {e}",
                project=record.project,
                resource=name,
                operation="delete",
            )
            raise
        record.id = ""
        cp_logger.info(
            "Environment variable deleted",
            project=record.project,
            resource=name,
            operation="delete",
        )

    def exists(self, record: EnvironmentVariableState) -> bool:
        return self.client.environment_variable_exists(
            record.project, self._lookup_name(record)
        )

    def import_state(self, record: EnvironmentVariableState) -> list[EnvironmentVariableState]:
        """Identity passthrough: the imported ID is the variable name."""
        if not record.name:
            record.name = record.id
        return [record]
