"""
Core layer - Entity protocol, types and HTTP transport.

This layer provides:
- The RestEntity protocol and the concrete entity dataclasses
- Path resolution and response hydration
- Low-level HTTP transport with auth headers and error classification
"""

from bambou.core.client import HTTPTransport, Response, build_headers
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
from bambou.core.types import Enterprise, Group, Me, User

__all__ = [
    "BambouError",
    "Enterprise",
    "EntityMixin",
    "Group",
    "HTTPTransport",
    "InvalidResponse",
    "Me",
    "MissingIdentifier",
    "NoSession",
    "ParseError",
    "RequestFailed",
    "Response",
    "RestEntity",
    "RestRootEntity",
    "TransportError",
    "User",
    "ValidationError",
    "build_headers",
]
