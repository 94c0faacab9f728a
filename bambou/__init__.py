"""
Bambou - client for hierarchical REST APIs.

Layers:
- core: Entity protocol, concrete types and HTTP transport
- session: Session with CRUD operations and the API key bootstrap
"""

from bambou.config import SessionConfig
from bambou.core.entity import EntityMixin, RestEntity, RestRootEntity
from bambou.core.errors import (
    BambouError,
    InvalidResponse,
    MissingIdentifier,
    NoSession,
    ParseError,
    RequestFailed,
    TransportError,
    ValidationError,
)
from bambou.session import Session

__version__ = "0.1.0"
__all__ = [
    "BambouError",
    "EntityMixin",
    "InvalidResponse",
    "MissingIdentifier",
    "NoSession",
    "ParseError",
    "RequestFailed",
    "RestEntity",
    "RestRootEntity",
    "Session",
    "SessionConfig",
    "TransportError",
    "ValidationError",
]
