"""Tests for session operations against a stub API server."""

import base64
import json

import pytest

from bambou import (
    InvalidResponse,
    MissingIdentifier,
    ParseError,
    RequestFailed,
    Session,
    SessionConfig,
    ValidationError,
)
from bambou.core.types import Enterprise, Group, Me, User


def _secret(request) -> str:
    token = request.headers["Authorization"].split(" ", 1)[1]
    return base64.b64decode(token).decode().partition(":")[2]


# =============================================================================
# Bootstrap
# =============================================================================


class TestConnect:
    """The password to API key exchange."""

    def test_end_to_end(self, stub_server, session):
        stub_server.add("GET", "/me", 200, '[{"apiKey":"k","ID":"1"}]')
        stub_server.add("GET", "/users", 200, '[{"ID":"a"},{"ID":"b"}]')

        root = Me()
        session.connect(root)
        assert session.api_key == "k"
        assert root.id == "1"
        assert root.session is session

        users: list[User] = []
        session.fetch_children(root, User, users)
        assert [u.id for u in users] == ["a", "b"]
        assert all(u.session is session for u in users)

    def test_bootstrap_uses_password_then_api_key(self, stub_server, session):
        stub_server.add("GET", "/me", 200, '[{"APIKey":"XYZ","ID":"1"}]')
        stub_server.add("GET", "/enterprises", 200, "[]")

        root = Me()
        session.connect(root)
        assert stub_server.last.headers["X-Nuage-Organization"] == "acme"
        assert _secret(stub_server.last) == "p1"

        session.fetch_children(root, Enterprise, [])
        assert _secret(stub_server.last) == "XYZ"

    def test_api_root_prefix(self, stub_server):
        config = SessionConfig(
            url=stub_server.url,
            username="csproot",
            password="csproot",
            organization="csp",
            root="/nuage/api/v5_0",
        )
        stub_server.add("GET", "/nuage/api/v5_0/me", 200, '[{"APIKey":"k","ID":"1"}]')
        session = Session(config)
        session.connect(Me())
        assert session.api_key == "k"

    def test_missing_api_key(self, stub_server, session):
        stub_server.add("GET", "/me", 200, '[{"ID":"1","userName":"csproot"}]')
        root = Me(user_name="before")
        with pytest.raises(InvalidResponse):
            session.connect(root)
        assert session.api_key is None
        assert root == Me(user_name="before")
        assert root.session is None

    def test_rejected_credentials(self, stub_server, session):
        stub_server.add("GET", "/me", 401, "Unauthorized")
        with pytest.raises(RequestFailed) as exc_info:
            session.connect(Me())
        assert exc_info.value.status == 401
        assert exc_info.value.body == "Unauthorized"
        assert session.api_key is None


# =============================================================================
# Single Entity Operations
# =============================================================================


class TestFetch:
    def test_populates_in_place(self, stub_server, session):
        stub_server.add("GET", "/enterprises/e1", 200, '[{"ID":"e1","name":"old"},{"ID":"e1","name":"acme"}]')
        enterprise = Enterprise(id="e1", description="local")
        ref = enterprise

        session.fetch(enterprise)
        assert ref is enterprise
        assert enterprise == Enterprise(id="e1", name="acme")
        assert enterprise.session is session

    def test_missing_identifier(self, stub_server, session):
        with pytest.raises(MissingIdentifier):
            session.fetch(Enterprise())
        assert stub_server.requests == []

    def test_empty_response_leaves_entity(self, stub_server, session):
        stub_server.add("GET", "/enterprises/e1", 200, "[]")
        enterprise = Enterprise(id="e1", name="kept")
        with pytest.raises(InvalidResponse):
            session.fetch(enterprise)
        assert enterprise == Enterprise(id="e1", name="kept")
        assert enterprise.session is None

    def test_unparseable_response(self, stub_server, session):
        stub_server.add("GET", "/enterprises/e1", 200, '{"ID":"e1"}')
        with pytest.raises(ParseError):
            session.fetch(Enterprise(id="e1"))

    def test_non_utf8_response_leaves_entity(self, stub_server, session):
        stub_server.add("GET", "/enterprises/e1", 200, '[{"ID":"e1","name":"café"}]'.encode("latin-1"))
        enterprise = Enterprise(id="e1", name="kept")
        with pytest.raises(ParseError):
            session.fetch(enterprise)
        assert enterprise == Enterprise(id="e1", name="kept")

    def test_not_found(self, stub_server, session):
        stub_server.add("GET", "/enterprises/e1", 404, "Cannot find enterprise")
        with pytest.raises(RequestFailed) as exc_info:
            session.fetch(Enterprise(id="e1"))
        assert exc_info.value.status == 404
        assert exc_info.value.body == "Cannot find enterprise"


class TestSave:
    def test_sends_state_and_rehydrates(self, stub_server, session):
        stub_server.add("PUT", "/groups/g1", 200, '[{"ID":"g1","name":"ops","role":"USER"}]')
        group = Group(id="g1", name="ops")

        session.save(group)
        assert json.loads(stub_server.last.body) == {"ID": "g1", "name": "ops"}
        assert stub_server.last.headers["Content-Type"] == "application/json; charset=utf-8"
        assert group.role == "USER"
        assert group.session is session

    def test_missing_identifier(self, session):
        with pytest.raises(MissingIdentifier):
            session.save(Group(name="ops"))

    def test_conflict(self, stub_server, session):
        stub_server.add("PUT", "/groups/g1", 409, "No attribute changed")
        group = Group(id="g1", name="ops")
        with pytest.raises(RequestFailed) as exc_info:
            session.save(group)
        assert exc_info.value.status == 409
        assert group == Group(id="g1", name="ops")


class TestDelete:
    def test_unbinds_entity(self, stub_server, session):
        stub_server.add("DELETE", "/users/u1", 204)
        user = User(id="u1")
        user.session = session

        resp = session.delete(user)
        assert resp.status == 204
        assert stub_server.last.method == "DELETE"
        assert user.session is None

    def test_wrong_status(self, stub_server, session):
        stub_server.add("DELETE", "/users/u1", 200, "[]")
        with pytest.raises(RequestFailed):
            session.delete(User(id="u1"))

    def test_missing_identifier(self, session):
        with pytest.raises(MissingIdentifier):
            session.delete(User())


# =============================================================================
# Child Operations
# =============================================================================


class TestCreateChild:
    def test_under_entity(self, stub_server, session):
        stub_server.add("POST", "/enterprises/e1/users", 201, '[{"ID":"u9","userName":"jdoe","parentID":"e1"}]')
        enterprise = Enterprise(id="e1")
        user = User(user_name="jdoe", password="secret")

        session.create_child(enterprise, user)
        assert json.loads(stub_server.last.body) == {"userName": "jdoe", "password": "secret"}
        assert user.id == "u9"
        assert user.parent_id == "e1"
        assert user.session is session

    def test_under_root(self, stub_server, session):
        stub_server.add("POST", "/enterprises", 201, '[{"ID":"e2","name":"new"}]')
        enterprise = Enterprise(name="new")
        session.create_child(Me(id="1"), enterprise)
        assert stub_server.last.path == "/enterprises"
        assert enterprise.id == "e2"

    def test_child_with_id(self, stub_server, session):
        with pytest.raises(ValidationError):
            session.create_child(Enterprise(id="e1"), User(id="u1"))
        assert stub_server.requests == []

    def test_expects_created(self, stub_server, session):
        stub_server.add("POST", "/enterprises", 200, '[{"ID":"e2"}]')
        enterprise = Enterprise(name="new")
        with pytest.raises(RequestFailed) as exc_info:
            session.create_child(Me(), enterprise)
        assert exc_info.value.status == 200
        assert enterprise.id is None

    def test_empty_response(self, stub_server, session):
        stub_server.add("POST", "/enterprises", 201, "[]")
        with pytest.raises(InvalidResponse):
            session.create_child(Me(), Enterprise(name="new"))


class TestFetchChildren:
    def test_replaces_contents(self, stub_server, session):
        stub_server.add("GET", "/enterprises/e1/groups", 200, '[{"ID":"g1"},{"ID":"g2"},{"ID":"g3"}]')
        groups = [Group(id="stale")]
        ref = groups

        session.fetch_children(Enterprise(id="e1"), Group, groups)
        assert ref is groups
        assert [g.id for g in groups] == ["g1", "g2", "g3"]
        assert all(g.session is session for g in groups)

    def test_empty_collection(self, stub_server, session):
        stub_server.add("GET", "/users", 200, "[]")
        users = [User(id="old")]
        session.fetch_children(Me(), User, users)
        assert users == []

    def test_parent_without_id(self, session):
        with pytest.raises(MissingIdentifier):
            session.fetch_children(Enterprise(), User, [])
