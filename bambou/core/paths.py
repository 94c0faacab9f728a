"""
REST path resolution for entities.

Paths here are relative to the API base; the session prefixes its base URL.
The hierarchy exists only in these paths, entities never point at each other.
"""

from bambou.core.entity import RestEntity
from bambou.core.errors import MissingIdentifier


def entity_path(entity: RestEntity) -> str:
    """
    Return the REST path of a single entity.

    Roots are addressed by their path alone; everything else gets its ID
    appended as a final segment.

    Raises:
        MissingIdentifier: If a non-root entity has no ID

    """
    path = type(entity).path
    if entity.is_root():
        return path
    if not entity.id:
        raise MissingIdentifier(
            f"{type(entity).__name__} has no ID, cannot build its path",
            {"path": path},
        )
    return f"{path}/{entity.id}"


def children_path(parent: RestEntity, child_type: type[RestEntity]) -> str:
    """
    Return the collection path for children of ``child_type`` under ``parent``.

    Group paths of top-level collections are absolute from the API root, so a
    root parent contributes nothing to the path.
    """
    if parent.is_root():
        return child_type.group_path
    return f"{entity_path(parent)}{child_type.group_path}"
