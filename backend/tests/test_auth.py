import asyncio

import pytest

from crm.services.auth import TOKEN_KEY, USER_KEY, AuthService
from crm.services.errors import AuthError, ValidationError
from crm.services.latency import Latency
from crm.services.session_store import JsonFileKeyValueStore, MemoryKeyValueStore
from conftest import ADMIN_EMAIL, ADMIN_PASSWORD


def test_login_stores_user_and_token(auth_service):
    session = asyncio.run(auth_service.login(ADMIN_EMAIL, ADMIN_PASSWORD))

    assert session.user.email == ADMIN_EMAIL
    assert session.user.name == "Sarah Johnson"
    assert auth_service.get_token() == session.token
    assert auth_service.current_user() == session.user
    assert auth_service.is_authenticated()


def test_login_with_wrong_password(auth_service):
    with pytest.raises(AuthError, match="invalid credentials"):
        asyncio.run(auth_service.login(ADMIN_EMAIL, "nope"))
    assert not auth_service.is_authenticated()


def test_login_with_malformed_credentials(auth_service):
    with pytest.raises(ValidationError):
        asyncio.run(auth_service.login("not-an-email", ADMIN_PASSWORD))
    with pytest.raises(ValidationError):
        asyncio.run(auth_service.login(ADMIN_EMAIL, ""))


def test_logout_clears_session(auth_service):
    asyncio.run(auth_service.login(ADMIN_EMAIL, ADMIN_PASSWORD))
    asyncio.run(auth_service.logout())

    assert auth_service.current_user() is None
    assert auth_service.get_token() is None
    assert asyncio.run(auth_service.validate_session()) is False


def test_authenticate_checks_token(auth_service):
    session = asyncio.run(auth_service.login(ADMIN_EMAIL, ADMIN_PASSWORD))

    assert auth_service.authenticate(session.token).email == ADMIN_EMAIL
    with pytest.raises(AuthError):
        auth_service.authenticate("forged")
    with pytest.raises(AuthError):
        auth_service.authenticate(None)


def test_refresh_token_replaces_token(auth_service):
    session = asyncio.run(auth_service.login(ADMIN_EMAIL, ADMIN_PASSWORD))
    new_token = asyncio.run(auth_service.refresh_token())

    assert new_token != session.token
    assert auth_service.get_token() == new_token


def test_update_profile_keeps_id(auth_service):
    asyncio.run(auth_service.login(ADMIN_EMAIL, ADMIN_PASSWORD))
    user = asyncio.run(auth_service.update_profile({"id": "hacked", "name": "Sam Lee"}))

    assert user.id == "user-1"
    assert user.name == "Sam Lee"
    assert auth_service.current_user().name == "Sam Lee"


def test_update_profile_rejects_malformed_email(auth_service):
    asyncio.run(auth_service.login(ADMIN_EMAIL, ADMIN_PASSWORD))

    with pytest.raises(ValidationError):
        asyncio.run(auth_service.update_profile({"email": "x@y..com"}))
    assert auth_service.current_user().email == ADMIN_EMAIL


def test_update_profile_requires_login(auth_service):
    with pytest.raises(AuthError):
        asyncio.run(auth_service.update_profile({"name": "Sam Lee"}))


def test_corrupt_user_entry_reads_as_logged_out():
    store = MemoryKeyValueStore({USER_KEY: "{not json", TOKEN_KEY: "abc"})
    service = AuthService(store, ADMIN_EMAIL, ADMIN_PASSWORD, latency=Latency.none())
    assert service.current_user() is None
    assert not service.is_authenticated()


# ===============================
# 会话文件
# ===============================
def test_json_file_store_survives_restart(tmp_path):
    path = str(tmp_path / "session.json")

    first = AuthService(JsonFileKeyValueStore(path), ADMIN_EMAIL, ADMIN_PASSWORD, latency=Latency.none())
    session = asyncio.run(first.login(ADMIN_EMAIL, ADMIN_PASSWORD))

    second = AuthService(JsonFileKeyValueStore(path), ADMIN_EMAIL, ADMIN_PASSWORD, latency=Latency.none())
    assert second.get_token() == session.token
    assert second.current_user().email == ADMIN_EMAIL


def test_json_file_store_missing_and_corrupt(tmp_path):
    path = tmp_path / "session.json"
    store = JsonFileKeyValueStore(str(path))
    assert store.get(TOKEN_KEY) is None

    path.write_text("{{{", encoding="utf-8")
    assert store.get(TOKEN_KEY) is None

    store.set(TOKEN_KEY, "t1")
    assert store.get(TOKEN_KEY) == "t1"
    store.remove(TOKEN_KEY)
    assert store.get(TOKEN_KEY) is None
