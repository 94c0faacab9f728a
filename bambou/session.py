"""
Bambou session - CRUD operations over REST entities.

The session owns the HTTP transport, the immutable configuration and the
API key obtained from the bootstrap exchange. Entities are populated in place
and keep a weak reference back to the session that populated them.
"""

import json
import threading
from typing import TypeVar

from bambou.config import SessionConfig
from bambou.core.client import HTTPTransport, Response, build_headers
from bambou.core.entity import RestEntity, RestRootEntity
from bambou.core.errors import InvalidResponse, ValidationError
from bambou.core.hydrate import decode_entities, decode_single, overwrite
from bambou.core.logging import get_logger
from bambou.core.paths import children_path, entity_path

E = TypeVar("E", bound=RestEntity)
C = TypeVar("C", bound=RestEntity)

logger = get_logger(__name__)


class Session:
    """
    A connection to the API.

    Example:
        session = Session(SessionConfig.from_env())

        me = Me()
        session.connect(me)

        users: list[User] = []
        session.fetch_children(me, User, users)

        enterprise = Enterprise(id="42")
        session.fetch(enterprise)
        enterprise.save()

    """

    def __init__(self, config: SessionConfig, transport: HTTPTransport | None = None):
        """
        Initialize the session.

        Args:
            config: Connection settings
            transport: HTTP transport override (built from config if None)

        """
        self.config = config
        self._transport = transport or HTTPTransport(
            timeout=config.timeout,
            ssl_context=config.ssl_context(),
        )
        self._api_key = config.api_key
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"Session(url={self.base_url!r}, organization={self.config.organization!r})"

    @property
    def api_key(self) -> str | None:
        """API key used instead of the password, once known."""
        return self._api_key

    @property
    def base_url(self) -> str:
        return self.config.base_url

    # =========================================================================
    # Request building
    # =========================================================================

    def headers(self) -> dict[str, str]:
        """Headers for the next request."""
        return build_headers(
            self.config.username,
            self.config.password,
            self.config.organization,
            self._api_key,
        )

    def entity_url(self, entity: RestEntity) -> str:
        """Absolute URL of a single entity."""
        return f"{self.base_url}{entity_path(entity)}"

    def children_url(self, parent: RestEntity, child_type: type[RestEntity]) -> str:
        """Absolute URL of the ``child_type`` collection under ``parent``."""
        return f"{self.base_url}{children_path(parent, child_type)}"

    # =========================================================================
    # Operations
    # =========================================================================

    def fetch(self, entity: E) -> Response:
        """
        Fetch an entity, populate its attributes and bind it to this session.

        Raises:
            MissingIdentifier: If a non-root entity has no ID
            TransportError: When the server could not be reached
            RequestFailed: When the server answered other than 200
            ParseError: When the body is not a list of entities
            InvalidResponse: When the list is empty

        """
        resp = self._fetch_entity(entity)
        entity.session = self
        return resp

    def save(self, entity: E) -> Response:
        """
        Update an entity on the server and repopulate it from the response.

        The API treats updates as idempotent field writes, so a failed save may
        be sent again as is.
        """
        url = self.entity_url(entity)
        body = json.dumps(entity.to_dict())

        resp = self._transport.put(url, self.headers(), body)

        updated = decode_single(resp.body, type(entity))
        overwrite(entity, updated)
        entity.session = self
        return resp

    def delete(self, entity: RestEntity) -> Response:
        """
        Delete an entity.

        The entity is unbound from the session afterwards and must not be used
        for further requests.
        """
        resp = self._transport.delete(self.entity_url(entity), self.headers())
        entity.session = None
        return resp

    def create_child(self, parent: RestEntity, child: C) -> Response:
        """
        Create ``child`` under ``parent`` and populate it from the response.

        Raises:
            ValidationError: If the child already has an ID

        """
        if child.id:
            raise ValidationError(
                f"{type(child).__name__} already has an ID, it cannot be created again",
                {"id": child.id},
            )

        url = self.children_url(parent, type(child))
        body = json.dumps(child.to_dict())

        resp = self._transport.post(url, self.headers(), body)

        created = decode_single(resp.body, type(child))
        overwrite(child, created)
        child.session = self
        return resp

    def fetch_children(self, parent: RestEntity, child_type: type[C], children: list[C]) -> Response:
        """
        Fetch the children of ``parent`` into ``children``, replacing its content.

        Every child is bound to this session.
        """
        resp = self._transport.get(self.children_url(parent, child_type), self.headers())

        fetched = decode_entities(resp.body, child_type)
        for child in fetched:
            child.session = self
        children[:] = fetched
        return resp

    def connect(self, root: RestRootEntity) -> Response:
        """
        Start the session by fetching the root entity.

        The API key found on the root replaces the password for every later
        request of this session.

        Raises:
            InvalidResponse: When the root carries no API key

        """
        logger.info("Starting new session", url=self.base_url, organization=self.config.organization)

        resp = self._transport.get(self.entity_url(root), self.headers())

        fetched = decode_single(resp.body, type(root))
        if not fetched.api_key:
            raise InvalidResponse(f"{type(root).__name__} response holds no API key")

        with self._lock:
            self._api_key = fetched.api_key
        overwrite(root, fetched)
        root.session = self

        logger.info("New session started", url=self.base_url, organization=self.config.organization)
        return resp

    def _fetch_entity(self, entity: E) -> Response:
        """Fetch an entity and populate its attributes, without binding it."""
        resp = self._transport.get(self.entity_url(entity), self.headers())

        # Even a single entity comes back wrapped in a list
        updated = decode_single(resp.body, type(entity))
        overwrite(entity, updated)
        return resp
