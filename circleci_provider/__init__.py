"""CircleCI provider — project environment variables for a declarative engine.

Entry point for the library. Build a client with :func:`configure` and
get the lifecycle adapter from :func:`resource_factory`::

    from circleci_provider import configure, resource_factory

    client = configure({"token": "...", "vcs_type": "github", "organization": "acme"})
    envvars = resource_factory("circleci_environment_variable", client)
"""

from .base import Attribute, ResourceBlueprint
from .client import CircleCIClient, EnvironmentVariable, validate_environment_variable_name
from .provider import configure, resource_factory
from .resources import EnvironmentVariableResource, EnvironmentVariableState

__all__ = [
    "Attribute",
    "ResourceBlueprint",
    "CircleCIClient",
    "EnvironmentVariable",
    "validate_environment_variable_name",
    "EnvironmentVariableResource",
    "EnvironmentVariableState",
    "configure",
    "resource_factory",
]
