"""Resource lifecycle blueprint."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

RecordT = TypeVar("RecordT")


@dataclass(frozen=True)
class Attribute:
    """Declarative description of one attribute of a resource record."""

    description: str
    required: bool = False
    force_new: bool = False
    sensitive: bool = False
    # Key under which the attribute is persisted, when it differs from its name.
    state_key: str | None = None


class ResourceBlueprint(ABC, Generic[RecordT]):
    """Abstract lifecycle contract a host engine drives for one resource kind.

    A record is ``Present`` while its ``id`` is set and ``Absent`` once it
    is cleared. There is no update: changing any force-new attribute means
    delete followed by create.
    """

    schema: dict[str, Attribute] = {}
    # Default per-operation deadlines in seconds, for the caller to enforce.
    timeouts: dict[str, float] = {}

    @abstractmethod
    def create(self, record: RecordT) -> None:
        """Create the remote object described by *record* and mark it present.

        Args:
            record: Desired state; updated in place with the actual state.
        """
        pass

    @abstractmethod
    def read(self, record: RecordT) -> None:
        """Refresh *record* from the remote object.

        Args:
            record: A present record; updated in place.
        """
        pass

    @abstractmethod
    def delete(self, record: RecordT) -> None:
        """Delete the remote object and mark *record* absent.

        Args:
            record: A present record.
        """
        pass

    @abstractmethod
    def exists(self, record: RecordT) -> bool:
        """Report whether the remote object still exists.

        Args:
            record: A present record.

        Returns:
            ``False`` if the object was removed out of band.
        """
        pass

    @abstractmethod
    def import_state(self, record: RecordT) -> list[RecordT]:
        """Turn an imported identity into records ready for :meth:`read`.

        Args:
            record: A record holding only the imported identity.

        Returns:
            The records to track.
        """
        pass

    def requires_replacement(self, old: dict[str, Any], new: dict[str, Any]) -> list[str]:
        """List the force-new attributes whose planned value differs.

        Args:
            old: Current state, as returned by ``record.state()``.
            new: Planned state, in the same shape.

        Returns:
            Names of attributes that force destroy-then-recreate.
        """
        return [
            key
            for key, attr in self.schema.items()
            if attr.force_new
            and old.get(attr.state_key or key) != new.get(attr.state_key or key)
        ]
