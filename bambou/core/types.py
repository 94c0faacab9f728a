"""
Concrete entity types of the API.

These dataclasses provide type safety and IDE support for API responses.
Wire names are camelCase and the identifier is sent as ``ID``.
"""

from dataclasses import dataclass
from typing import Any, ClassVar

from bambou.core.entity import EntityMixin


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    """Drop unset attributes so they are not sent as nulls."""
    return {k: v for k, v in data.items() if v is not None}


# =============================================================================
# Root
# =============================================================================


@dataclass
class Me(EntityMixin):
    """The authenticated user; root of the API."""

    path: ClassVar[str] = "/me"
    group_path: ClassVar[str] = "/me"

    id: str | None = None
    api_key: str | None = None
    user_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    enterprise_id: str | None = None
    enterprise_name: str | None = None
    role: str | None = None

    def is_root(self) -> bool:
        return True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Me":
        """Create from API response dict."""
        return cls(
            id=data.get("ID"),
            api_key=data.get("APIKey") or data.get("apiKey"),
            user_name=data.get("userName"),
            first_name=data.get("firstName"),
            last_name=data.get("lastName"),
            email=data.get("email"),
            enterprise_id=data.get("enterpriseID"),
            enterprise_name=data.get("enterpriseName"),
            role=data.get("role"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return _compact({
            "ID": self.id,
            "userName": self.user_name,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "enterpriseID": self.enterprise_id,
            "enterpriseName": self.enterprise_name,
            "role": self.role,
        })


# =============================================================================
# Enterprise Types
# =============================================================================


@dataclass
class Enterprise(EntityMixin):
    """An enterprise (tenant) managed by the API."""

    path: ClassVar[str] = "/enterprises"
    group_path: ClassVar[str] = "/enterprises"

    id: str | None = None
    name: str | None = None
    description: str | None = None
    parent_id: str | None = None
    parent_type: str | None = None

    def is_root(self) -> bool:
        return False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Enterprise":
        """Create from API response dict."""
        return cls(
            id=data.get("ID"),
            name=data.get("name"),
            description=data.get("description"),
            parent_id=data.get("parentID"),
            parent_type=data.get("parentType"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return _compact({
            "ID": self.id,
            "name": self.name,
            "description": self.description,
            "parentID": self.parent_id,
            "parentType": self.parent_type,
        })


# =============================================================================
# User Types
# =============================================================================


@dataclass
class User(EntityMixin):
    """A user of an enterprise."""

    path: ClassVar[str] = "/users"
    group_path: ClassVar[str] = "/users"

    id: str | None = None
    user_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    password: str | None = None
    mobile_number: str | None = None
    disabled: bool | None = None
    parent_id: str | None = None

    def is_root(self) -> bool:
        return False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        """Create from API response dict."""
        return cls(
            id=data.get("ID"),
            user_name=data.get("userName"),
            first_name=data.get("firstName"),
            last_name=data.get("lastName"),
            email=data.get("email"),
            password=data.get("password"),
            mobile_number=data.get("mobileNumber"),
            disabled=data.get("disabled"),
            parent_id=data.get("parentID"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return _compact({
            "ID": self.id,
            "userName": self.user_name,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "password": self.password,
            "mobileNumber": self.mobile_number,
            "disabled": self.disabled,
            "parentID": self.parent_id,
        })


# =============================================================================
# Group Types
# =============================================================================


@dataclass
class Group(EntityMixin):
    """A group of users."""

    path: ClassVar[str] = "/groups"
    group_path: ClassVar[str] = "/groups"

    id: str | None = None
    name: str | None = None
    description: str | None = None
    role: str | None = None
    private: bool | None = None
    parent_id: str | None = None

    def is_root(self) -> bool:
        return False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Group":
        """Create from API response dict."""
        return cls(
            id=data.get("ID"),
            name=data.get("name"),
            description=data.get("description"),
            role=data.get("role"),
            private=data.get("private"),
            parent_id=data.get("parentID"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return _compact({
            "ID": self.id,
            "name": self.name,
            "description": self.description,
            "role": self.role,
            "private": self.private,
            "parentID": self.parent_id,
        })
