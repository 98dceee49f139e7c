"""Provider registration.

Provides :func:`configure`, which turns a raw configuration dict into a
:class:`~circleci_provider.client.CircleCIClient`, and
:func:`resource_factory`, which returns the lifecycle adapter for a
resource type via ``@overload`` signatures so IDEs can autocomplete methods.
"""

from typing import overload, Literal, Any

import httpx

from circleci_provider.base import ResourceBlueprint
from circleci_provider.base.config import validate_config
from circleci_provider.base.logger import cp_logger
from circleci_provider.client import CircleCIClient
from circleci_provider.resources import EnvironmentVariableResource


# Resource type -> lifecycle adapter
RESOURCE_REGISTRY: dict[str, type[ResourceBlueprint]] = {
    "circleci_environment_variable": EnvironmentVariableResource,
}


def configure(config: dict, http_client: httpx.Client | None = None) -> CircleCIClient:
    """Validate provider settings and build the API client shared by all resources.

    Args:
        config: Raw configuration dictionary; missing keys fall back to
            ``CIRCLECI_*`` environment variables.
        http_client: Optional preconfigured :class:`httpx.Client`.

    Returns:
        A ready :class:`CircleCIClient`.

    Raises:
        pydantic.ValidationError: If the config is invalid or incomplete.
    """
    config_obj = validate_config(config)
    cp_logger.debug(
        f"Configured CircleCI provider for {config_obj.vcs_type}/{config_obj.organization}",
        operation="configure",
    )
    return CircleCIClient(config_obj, http_client=http_client)


@overload
def resource_factory(
    resource_type: Literal["circleci_environment_variable"], client: CircleCIClient
) -> EnvironmentVariableResource: ...


@overload
def resource_factory(resource_type: str, client: CircleCIClient) -> ResourceBlueprint: ...


def resource_factory(resource_type: str, client: CircleCIClient) -> Any:
    """
    Create the lifecycle adapter for a resource type.
    Args:
        resource_type: The resource type name (e.g. 'circleci_environment_variable').
        client: Configured API client.
    Returns:
        An instance of the registered adapter class.
    Raises:
        ValueError: If the resource type is not supported.
    """
    if resource_type not in RESOURCE_REGISTRY:
        raise ValueError(f"Unsupported resource type: {resource_type}")
    return RESOURCE_REGISTRY[resource_type](client)
