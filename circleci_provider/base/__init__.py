"""Lifecycle blueprint and core utilities.

Every resource adapter inherits from :class:`ResourceBlueprint`.
"""

from .resource import Attribute, ResourceBlueprint
from .supported_resources import existing_resources


__all__ = [
    "Attribute",
    "ResourceBlueprint",
    "existing_resources",
]
