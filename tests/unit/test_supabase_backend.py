import json

import pytest
import requests

from config.settings import SupabaseConfig
from services.storage.errors import StoreError
from services.storage.supabase_backend import SupabaseBackend


class FakeResponse:
    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self._body = body
        self.text = "" if body is None else json.dumps(body)

    def json(self):
        if self._body is None:
            raise ValueError("no body")
        return self._body


class HtmlResponse:
    """A 2xx reply from a proxy or gateway page instead of PostgREST."""

    def __init__(self, status_code=200, text="<html><body>Bad Gateway</body></html>"):
        self.status_code = status_code
        self.text = text

    def json(self):
        raise ValueError("Expecting value: line 1 column 1 (char 0)")


class FakeSession:
    def __init__(self, *responses, error=None):
        self.responses = list(responses)
        self.error = error
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error:
            raise self.error
        return self.responses.pop(0)


def _backend(session) -> SupabaseBackend:
    config = SupabaseConfig(url="https://project.supabase.co/", anon_key="anon-key")
    return SupabaseBackend(config, session=session)


def test_backend_requires_url_and_key() -> None:
    with pytest.raises(ValueError):
        SupabaseBackend(SupabaseConfig(url="", anon_key=None), session=FakeSession())


def test_insert_posts_row_and_returns_representation() -> None:
    session = FakeSession(FakeResponse(201, [{"id": "abc", "applicant_name": "Ada", "status": "pending"}]))
    row = _backend(session).insert("cvs", {"applicant_name": "Ada", "status": "pending"})

    method, url, kwargs = session.calls[0]
    assert method == "POST"
    assert url == "https://project.supabase.co/rest/v1/cvs"
    assert kwargs["json"] == {"applicant_name": "Ada", "status": "pending"}
    assert kwargs["headers"]["apikey"] == "anon-key"
    assert kwargs["headers"]["Prefer"] == "return=representation"
    assert row["id"] == "abc"


def test_unique_violation_surfaces_postgres_code() -> None:
    body = {"code": "23505", "message": 'duplicate key value violates unique constraint "cvs_user_id_key"'}
    session = FakeSession(FakeResponse(409, body))

    with pytest.raises(StoreError) as excinfo:
        _backend(session).insert("cvs", {"applicant_name": "Ada"})

    assert excinfo.value.is_unique_violation
    assert excinfo.value.status == 409


def test_other_errors_are_not_unique_violations() -> None:
    session = FakeSession(FakeResponse(500, None))
    with pytest.raises(StoreError) as excinfo:
        _backend(session).insert("cvs", {"applicant_name": "Ada"})
    assert not excinfo.value.is_unique_violation


def test_network_errors_become_store_errors() -> None:
    session = FakeSession(error=requests.exceptions.ConnectionError("refused"))
    with pytest.raises(StoreError) as excinfo:
        _backend(session).select("positions")
    assert excinfo.value.code == "network"


def test_select_orders_descending() -> None:
    session = FakeSession(FakeResponse(200, [{"id": 1}, {"id": 2}]))
    rows = _backend(session).select("cvs", order_by="requirements_match")

    _, url, kwargs = session.calls[0]
    assert url.endswith("/rest/v1/cvs")
    assert kwargs["params"] == {"select": "*", "order": "requirements_match.desc"}
    assert rows == [{"id": 1}, {"id": 2}]


def test_get_session_uses_user_token() -> None:
    session = FakeSession(FakeResponse(200, {"id": "u-1", "email": "boss@example.com"}))
    result = _backend(session).get_session("user-jwt")

    _, url, kwargs = session.calls[0]
    assert url.endswith("/auth/v1/user")
    assert kwargs["headers"]["Authorization"] == "Bearer user-jwt"
    assert result.user_id == "u-1"
    assert result.is_admin is False


def test_get_session_without_token_or_with_expired_token() -> None:
    backend = _backend(FakeSession(FakeResponse(401, {"message": "invalid JWT"})))
    assert backend.get_session(None) is None
    assert backend.get_session("expired") is None


def test_admin_role_lookup() -> None:
    session = FakeSession(FakeResponse(200, [{"is_admin": True}]), FakeResponse(200, []))
    backend = _backend(session)

    assert backend.is_admin("u-1") is True
    assert session.calls[0][2]["params"] == {"select": "is_admin", "id": "eq.u-1"}
    assert backend.is_admin("u-2") is False


def test_admin_lookup_failure_denies() -> None:
    backend = _backend(FakeSession(FakeResponse(500, {"message": "boom"})))
    assert backend.is_admin("u-1") is False


def test_non_json_select_body_raises_store_error() -> None:
    with pytest.raises(StoreError) as excinfo:
        _backend(FakeSession(HtmlResponse())).select("cvs", order_by="requirements_match")
    assert excinfo.value.code == "invalid_response"
    assert excinfo.value.status == 200


def test_non_json_insert_body_raises_store_error() -> None:
    with pytest.raises(StoreError) as excinfo:
        _backend(FakeSession(HtmlResponse(201))).insert("cvs", {"applicant_name": "Ada"})
    assert excinfo.value.code == "invalid_response"
    assert not excinfo.value.is_unique_violation


def test_non_json_session_body_raises_store_error() -> None:
    with pytest.raises(StoreError) as excinfo:
        _backend(FakeSession(HtmlResponse())).get_session("user-jwt")
    assert excinfo.value.code == "invalid_response"


def test_non_json_admin_lookup_denies() -> None:
    assert _backend(FakeSession(HtmlResponse())).is_admin("u-1") is False


def test_unexpected_json_shapes_are_not_sessions_or_admins() -> None:
    backend = _backend(FakeSession(FakeResponse(200, ["u-1"]), FakeResponse(200, {"is_admin": True})))
    assert backend.get_session("user-jwt") is None
    assert backend.is_admin("u-1") is False
