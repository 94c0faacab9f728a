"""
Turn response bodies back into entities.

The API wraps every result in a JSON array, even when a single entity is
fetched or saved. For single-entity calls the last element of the array is
the current one.
"""

import dataclasses
import json
from typing import Any, TypeVar

from bambou.core.entity import RestEntity
from bambou.core.errors import InvalidResponse, ParseError

E = TypeVar("E", bound=RestEntity)

_SESSION_ATTRS = frozenset({"session", "_session_ref"})


def decode_entities(body: str, entity_type: type[E]) -> list[E]:
    """
    Decode a JSON array of entities.

    Raises:
        ParseError: If the body is not a JSON array of objects, or an element
            cannot be built into ``entity_type``

    """
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise ParseError(f"Failed to parse body: {e}") from e

    if not isinstance(data, list):
        raise ParseError(
            f"Failed to parse body: expected a list of {entity_type.__name__}, got {type(data).__name__}"
        )

    entities = []
    for item in data:
        if not isinstance(item, dict):
            raise ParseError(f"Failed to parse body: expected an object, got {type(item).__name__}")
        try:
            entities.append(entity_type.from_dict(item))
        except (KeyError, TypeError, ValueError) as e:
            raise ParseError(f"Failed to parse {entity_type.__name__}: {e}") from e
    return entities


def decode_single(body: str, entity_type: type[E]) -> E:
    """
    Decode the authoritative entity from a list-wrapped response.

    Raises:
        ParseError: If the body cannot be decoded
        InvalidResponse: If the list is empty

    """
    entities = decode_entities(body, entity_type)
    if not entities:
        raise InvalidResponse(f"Failed to read {entity_type.__name__}: body is empty.")
    return entities[-1]


def _state_names(obj: Any) -> set[str]:
    """Names of instance attributes, whether kept in __dict__ or in slots."""
    names = set(getattr(obj, "__dict__", ()))
    for klass in type(obj).__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        names.update(s for s in slots if s not in ("__dict__", "__weakref__"))
    return names


def overwrite(target: Any, source: Any) -> None:
    """
    Replace the state of ``target`` with the state of ``source``, in place.

    The session back-reference is left alone; callers attach it afterwards.
    """
    if dataclasses.is_dataclass(target):
        names = {f.name for f in dataclasses.fields(target)}
    else:
        names = _state_names(target) | _state_names(source)

    for name in names - _SESSION_ATTRS:
        if hasattr(source, name):
            setattr(target, name, getattr(source, name))
        elif hasattr(target, name):
            delattr(target, name)
