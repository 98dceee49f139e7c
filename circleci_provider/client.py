"""CircleCI v1.1 API client for project environment variables.

Wraps an :class:`httpx.Client` and translates the four variable
operations (exists, add, get, delete) into authenticated requests
against ``{base_url}/project/{vcs_type}/{organization}/{project}/envvar``.
The client never retries; callers compose retries around it if needed.
"""

from __future__ import annotations

import re

import httpx
from pydantic import BaseModel, ValidationError as PydanticValidationError
from pydantic_core import PydanticSerializationError

from circleci_provider.base.config import ProviderConfig
from circleci_provider.base.exceptions import (
    EncodingError,
    TransportError,
    UnexpectedStatusError,
)
from circleci_provider.base.logger import cp_logger, new_request_id

ENVVAR_ENDPOINT = "envvar"

# POSIX [[:alpha:]] and [[:word:]] are ASCII-only.
_ENVVAR_NAME_RE = re.compile(r"[A-Za-z]+[A-Za-z0-9_]*")


class EnvironmentVariable(BaseModel):
    """Environment variable of a CircleCI project, as sent over the wire."""

    name: str
    value: str


def validate_environment_variable_name(name: str) -> bool:
    """Return ``True`` if CircleCI accepts *name* as a variable name."""
    return _ENVVAR_NAME_RE.fullmatch(name) is not None


class CircleCIClient:
    """Client for the CircleCI API.

    Attributes:
        config: Frozen provider configuration.
        http: Underlying :class:`httpx.Client`.
    """

    def __init__(self, config: ProviderConfig, http_client: httpx.Client | None = None):
        """Initialize the client.

        Args:
            config: Validated provider configuration.
            http_client: Optional preconfigured :class:`httpx.Client`
                (custom transport, timeouts). When omitted, the client
                owns a default one and closes it in :meth:`close`.
        """
        self.config = config
        self._owns_http = http_client is None
        self.http = http_client if http_client is not None else httpx.Client()

    def __enter__(self) -> CircleCIClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    @property
    def _auth(self) -> httpx.BasicAuth:
        return httpx.BasicAuth(self.config.token.get_secret_value(), "")

    def build_api_url(self, project: str, endpoint: str) -> str:
        """Build the URL of a project sub-resource."""
        return (
            f"{self.config.base_url}/project/{self.config.vcs_type}/"
            f"{self.config.organization}/{project}/{endpoint}"
        )

    def _envvar_url(self, project: str, name: str) -> str:
        return f"{self.build_api_url(project, ENVVAR_ENDPOINT)}/{name}"

    def _send(
        self,
        method: str,
        url: str,
        *,
        project: str,
        name: str,
        headers: dict[str, str] | None = None,
        content: bytes | None = None,
    ) -> httpx.Response:
        request_id = new_request_id()
        log_ctx = {
            "project": project,
            "resource": name,
            "operation": method.lower(),
            "request_id": request_id,
        }
        cp_logger.debug(f"{method} {url}", **log_ctx)
        try:
            response = self.http.request(
                method, url, headers=headers, content=content, auth=self._auth
            )
        except httpx.RequestError as e:
            cp_logger.error(f"{method} {url} failed: {e}", **log_ctx)
            raise TransportError(f"circleci: {method} {url} failed: {e}") from e
        cp_logger.debug(
            f"{method} {url} -> {response.status_code}",
            status_code=response.status_code,
            **log_ctx,
        )
        return response

    def environment_variable_exists(self, project: str, name: str) -> bool:
        """Check whether an environment variable exists.

        Args:
            project: CircleCI project name.
            name: Variable name.

        Returns:
            ``True`` on HTTP 200, ``False`` on HTTP 404.

        Raises:
            UnexpectedStatusError: On any other status code.
            TransportError: If the request could not be sent.
        """
        response = self._send(
            "HEAD", self._envvar_url(project, name), project=project, name=name
        )
        if response.status_code == httpx.codes.OK:
            return True
        if response.status_code == httpx.codes.NOT_FOUND:
            return False
        raise UnexpectedStatusError(
            response.status_code, "getting", project=project, name=name
        )

    def add_environment_variable(self, project: str, name: str, value: str) -> None:
        """Create a new environment variable.

        https://circleci.com/docs/api/#add-environment-variables

        Args:
            project: CircleCI project name.
            name: Variable name.
            value: Plaintext value; sent once, never returned by the API.

        Raises:
            UnexpectedStatusError: Unless the API answers HTTP 201.
            EncodingError: If the payload cannot be serialized.
            TransportError: If the request could not be sent.
        """
        try:
            body = EnvironmentVariable(name=name, value=value).model_dump_json().encode("utf-8")
        except (PydanticValidationError, PydanticSerializationError, UnicodeEncodeError) as e:
            raise EncodingError(
                f"circleci: cannot encode environment variable '{name}': {e}"
            ) from e

        response = self._send(
            "POST",
            self.build_api_url(project, ENVVAR_ENDPOINT),
            project=project,
            name=name,
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json; charset=utf-8",
            },
            content=body,
        )
        if response.status_code != httpx.codes.CREATED:
            raise UnexpectedStatusError(
                response.status_code, "creating", project=project, name=name
            )

    def get_environment_variable(self, project: str, name: str) -> EnvironmentVariable:
        """Return an environment variable of a project given its name.

        The API masks the value, so only ``name`` is meaningful.

        https://circleci.com/docs/api/#get-single-environment-variable

        Raises:
            UnexpectedStatusError: Unless the API answers HTTP 200.
            EncodingError: If the response body cannot be decoded.
            TransportError: If the request could not be sent.
        """
        response = self._send(
            "GET",
            self._envvar_url(project, name),
            project=project,
            name=name,
            headers={"Accept": "application/json"},
        )
        if response.status_code != httpx.codes.OK:
            raise UnexpectedStatusError(
                response.status_code, "getting", project=project, name=name
            )
        try:
            return EnvironmentVariable.model_validate_json(response.content)
        except PydanticValidationError as e:
            raise EncodingError(
                f"circleci: cannot decode environment variable '{name}': {e}"
            ) from e

    def delete_environment_variable(self, project: str, name: str) -> None:
        """Delete an environment variable from a project given its name.

        https://circleci.com/docs/api/#delete-environment-variables

        Raises:
            UnexpectedStatusError: Unless the API answers HTTP 200.
            TransportError: If the request could not be sent.
        """
        response = self._send(
            "DELETE",
            self._envvar_url(project, name),
            project=project,
            name=name,
            headers={"Accept": "application/json"},
        )
        if response.status_code != httpx.codes.OK:
            raise UnexpectedStatusError(
                response.status_code, "deleting", project=project, name=name
            )
