# File: tests/test_access_filter.py

from datetime import timedelta

import pytest

from lms.api.access_filter import Access, build_route_policy, resolve_access
from lms.core.security import create_access_token

RULES = build_route_policy("/api")


@pytest.mark.parametrize(
    "method, path, expected",
    [
        ("POST", "/api/auth/login", Access.PUBLIC),
        ("POST", "/api/auth/register", Access.PUBLIC),
        ("GET", "/api/books", Access.PUBLIC),
        ("GET", "/api/books/search", Access.PUBLIC),
        ("GET", "/api/books/3", Access.PUBLIC),
        ("POST", "/api/books", Access.LIBRARIAN),
        ("PUT", "/api/books/3", Access.LIBRARIAN),
        ("DELETE", "/api/books/3", Access.LIBRARIAN),
        ("GET", "/api/librarian/members", Access.LIBRARIAN),
        ("POST", "/api/librarian/members/1/extend-membership", Access.LIBRARIAN),
        ("GET", "/api/member/profile", Access.MEMBER),
        ("GET", "/api/users/me", Access.AUTHENTICATED),
        ("GET", "/api/bookshelf", Access.AUTHENTICATED),
        ("GET", "/healthz", Access.PUBLIC),
        ("GET", "/openapi.json", Access.PUBLIC),
    ],
)
def test_route_policy(method, path, expected):
    assert resolve_access(RULES, method, path) is expected


def test_policy_follows_api_prefix():
    rules = build_route_policy("/library")
    assert resolve_access(rules, "GET", "/library/books") is Access.PUBLIC
    assert resolve_access(rules, "GET", "/api/books") is Access.AUTHENTICATED


def test_protected_route_without_token_is_401(client):
    resp = client.get("/api/librarian/members")

    assert resp.status_code == 401
    body = resp.json()
    assert set(body) == {"timestamp", "status", "error", "message", "path"}
    assert body["status"] == 401
    assert body["error"] == "Unauthorized"
    assert body["path"] == "/api/librarian/members"
    assert resp.headers["www-authenticate"] == "Bearer"


def test_wrong_role_is_403(client, member_headers):
    resp = client.get("/api/librarian/members", headers=member_headers)

    assert resp.status_code == 403
    body = resp.json()
    assert body["error"] == "Forbidden"
    assert "Librarian" in body["message"]


def test_librarian_cannot_use_member_routes(client, librarian_headers):
    assert client.get("/api/member/profile", headers=librarian_headers).status_code == 403


def test_public_route_ignores_bad_token(client):
    resp = client.get("/api/books", headers={"Authorization": "Bearer garbage"})
    assert resp.status_code == 200


def test_bad_token_leaves_request_anonymous(client):
    resp = client.get("/api/users/me", headers={"Authorization": "Bearer garbage"})
    assert resp.status_code == 401


def test_non_bearer_scheme_is_ignored(client, librarian):
    resp = client.get("/api/users/me", headers={"Authorization": "Basic dXNlcjpwYXNz"})
    assert resp.status_code == 401


def test_expired_token_is_401(client, settings, librarian):
    token = create_access_token(librarian.id, expires_delta=timedelta(seconds=-1), settings=settings)

    resp = client.get("/api/librarian/members", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 401


def test_token_for_deleted_user_is_401(client, settings, db, member):
    token = create_access_token(member.id, settings=settings)
    db.delete(member)
    db.commit()

    resp = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 401


def test_token_survives_account_disable(client, db, member, member_headers):
    member.enabled = False
    db.commit()

    resp = client.get("/api/member/profile", headers=member_headers)

    assert resp.status_code == 200
    assert resp.json()["membershipValid"] is False


def test_role_comes_from_current_user_row(client, db, member, member_headers):
    from lms.models.user import UserRole

    member.role = UserRole.LIBRARIAN
    db.commit()

    assert client.get("/api/librarian/members", headers=member_headers).status_code == 200


def test_cors_preflight_passes_without_token(client):
    resp = client.options(
        "/api/librarian/members",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "GET",
        },
    )

    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "http://localhost:3000"


def test_denied_response_carries_cors_headers(client):
    resp = client.get("/api/librarian/members", headers={"Origin": "http://localhost:3000"})

    assert resp.status_code == 401
    assert resp.headers["access-control-allow-origin"] == "http://localhost:3000"


def test_member_profile(client, member_headers):
    resp = client.get("/api/member/profile", headers=member_headers)

    assert resp.status_code == 200
    data = resp.json()
    assert data["email"] == "reader@library.com"
    assert data["membershipValid"] is True
