import pytest
from types import SimpleNamespace
from unittest.mock import MagicMock
from fastapi import HTTPException
from starlette.requests import Request

from shop.utils import security


def _request(headers=None, cookies=None):
    raw = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    if cookies:
        raw.append((b"cookie", "; ".join(f"{k}={v}" for k, v in cookies.items()).encode()))
    return Request({"type": "http", "headers": raw, "method": "GET", "path": "/"})

def _patch_supabase(monkeypatch, auth_id="uuid-1", rows=None):
    anon = MagicMock()
    anon.auth.get_user.return_value = SimpleNamespace(user=SimpleNamespace(id=auth_id) if auth_id else None)
    service = MagicMock()
    query = service.table.return_value
    query.select.return_value = query
    query.eq.return_value = query
    query.limit.return_value = query
    query.execute.return_value = SimpleNamespace(data=rows if rows is not None else [{"id": 7, "email": "a@b", "role": None}])
    monkeypatch.setattr("shop.infra.supabase_client.get_supabase", lambda: anon)
    monkeypatch.setattr("shop.infra.supabase_client.get_service_supabase", lambda: service)
    return anon, query

def test_token_bearer_has_priority():
    req = _request(headers={"Authorization": "Bearer abc"}, cookies={security.COOKIE_NAME: "cookie-token"})
    assert security._token_from_request(req) == "abc"

def test_token_falls_back_to_cookie():
    assert security._token_from_request(_request(cookies={security.COOKIE_NAME: "cookie-token"})) == "cookie-token"

def test_current_user_resolved(monkeypatch):
    anon, query = _patch_supabase(monkeypatch)
    user = security.get_current_user(_request(headers={"Authorization": "Bearer abc"}))
    assert user == {"id": 7, "email": "a@b", "role": "user"}
    anon.auth.get_user.assert_called_once_with("abc")
    query.eq.assert_called_with("auth_id", "uuid-1")

def test_current_user_without_token():
    with pytest.raises(HTTPException) as exc:
        security.get_current_user(_request())
    assert exc.value.status_code == 401

def test_current_user_unknown_in_users_table(monkeypatch):
    _patch_supabase(monkeypatch, rows=[])
    with pytest.raises(HTTPException) as exc:
        security.get_current_user(_request(headers={"Authorization": "Bearer abc"}))
    assert exc.value.status_code == 401

def test_current_user_auth_error_is_401(monkeypatch):
    anon, _ = _patch_supabase(monkeypatch)
    anon.auth.get_user.side_effect = Exception("jwt expired")
    with pytest.raises(HTTPException) as exc:
        security.get_current_user(_request(headers={"Authorization": "Bearer abc"}))
    assert exc.value.status_code == 401
