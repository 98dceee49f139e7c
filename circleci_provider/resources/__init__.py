"""Resource lifecycle adapters."""

from .environment_variable import (
    EnvironmentVariableResource,
    EnvironmentVariableState,
    fingerprint,
)

__all__ = [
    "EnvironmentVariableResource",
    "EnvironmentVariableState",
    "fingerprint",
]
