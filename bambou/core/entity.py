"""
The entity capability set.

Any type that satisfies ``RestEntity`` can be fetched, saved, deleted and
nested under other entities by a ``Session``. Conformance is structural: a
plain dataclass with the right attributes works. ``EntityMixin`` adds a weak
back-reference to the session and entity-level shortcuts for the session
operations.
"""

import weakref
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, TypeVar, runtime_checkable

from bambou.core.errors import NoSession

if TYPE_CHECKING:
    from bambou.core.client import Response
    from bambou.session import Session


@runtime_checkable
class RestEntity(Protocol):
    """Structural type of everything a session can operate on."""

    # REST path of the entity, without its ID
    path: ClassVar[str]
    # Collection path under which entities of this type are listed and created
    group_path: ClassVar[str]

    id: str | None
    session: "Session | None"

    def is_root(self) -> bool:
        """Return True if the entity is a root of the API."""
        ...

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Any:
        """Create from API response dict."""
        ...

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        ...


@runtime_checkable
class RestRootEntity(RestEntity, Protocol):
    """A root entity; after password authentication it carries the API key."""

    api_key: str | None


C = TypeVar("C", bound=RestEntity)


class EntityMixin:
    """
    Session binding and entity-level operations.

    The session is held through a weak reference: the session must outlive
    the entities it populated. Once it is gone, or after ``delete``, the
    entity behaves as unbound.
    """

    _session_ref: "weakref.ReferenceType[Session] | None" = None

    @property
    def session(self) -> "Session | None":
        """The session that last populated this entity, if still alive."""
        if self._session_ref is None:
            return None
        return self._session_ref()

    @session.setter
    def session(self, value: "Session | None") -> None:
        self._session_ref = weakref.ref(value) if value is not None else None

    def _require_session(self) -> "Session":
        session = self.session
        if session is None:
            raise NoSession()
        return session

    def fetch(self) -> "Response":
        """Fetch the entity from the server and populate its attributes."""
        return self._require_session().fetch(self)

    def save(self) -> "Response":
        """Update the entity on the server from its attributes."""
        return self._require_session().save(self)

    def delete(self) -> "Response":
        """Delete the entity from the server. The entity is unbound afterwards."""
        return self._require_session().delete(self)

    def fetch_children(self, child_type: type[C]) -> list[C]:
        """Fetch the children of the given type."""
        children: list[C] = []
        self._require_session().fetch_children(self, child_type, children)
        return children

    def create_child(self, child: RestEntity) -> "Response":
        """Create a child entity under this one."""
        return self._require_session().create_child(self, child)
