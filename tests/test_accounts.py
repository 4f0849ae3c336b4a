import pytest

from core.accounts import Accounts
from core.errors import AuthenticationFailure, NotFound, UsernameTaken, ValidationError


@pytest.fixture
def accounts(store, credentials):
    return Accounts(store, credentials)


def test_register_logs_the_user_in(accounts):
    user, token = accounts.register("goose", "honkhonk")
    assert user.id is not None
    assert user.username == "goose"
    assert accounts.current_user(token).id == user.id


def test_register_never_stores_the_plaintext(accounts):
    user, _ = accounts.register("goose", "honkhonk")
    assert b"honkhonk" not in user.password_hash
    assert len(user.password_hash) == 32
    assert len(user.salt) == 16


def test_register_duplicate_username(accounts):
    accounts.register("goose", "honkhonk")
    with pytest.raises(UsernameTaken):
        accounts.register("goose", "other password")


def test_register_validates_input(accounts):
    with pytest.raises(ValidationError):
        accounts.register("   ", "honkhonk")
    with pytest.raises(ValidationError):
        accounts.register("goose", "")
    with pytest.raises(ValidationError):
        accounts.register("g" * 65, "honkhonk")


def test_login(accounts):
    registered, _ = accounts.register("goose", "honkhonk")
    user, token = accounts.login("goose", "honkhonk")
    assert user.id == registered.id
    assert accounts.current_user(token).username == "goose"


def test_login_failures_look_the_same(accounts):
    accounts.register("goose", "honkhonk")

    with pytest.raises(AuthenticationFailure) as wrong_password:
        accounts.login("goose", "quack")
    with pytest.raises(AuthenticationFailure) as unknown_user:
        accounts.login("duck", "honkhonk")

    assert str(wrong_password.value) == str(unknown_user.value)


def test_unknown_user_still_runs_a_derivation(accounts, monkeypatch):
    calls = []
    original = accounts.credentials.verify

    def counting_verify(password, stored):
        calls.append(password)
        return original(password, stored)

    monkeypatch.setattr(accounts.credentials, "verify", counting_verify)
    with pytest.raises(AuthenticationFailure):
        accounts.login("nobody", "secret")
    assert calls == ["secret"]


def test_logout_closes_the_session(accounts):
    _, token = accounts.register("goose", "honkhonk")
    accounts.logout(token)
    with pytest.raises(AuthenticationFailure):
        accounts.current_user(token)


def test_sessions_are_independent(accounts):
    _, first = accounts.register("goose", "honkhonk")
    _, second = accounts.login("goose", "honkhonk")
    assert first != second

    accounts.logout(first)
    assert accounts.current_user(second).username == "goose"


def test_session_for_deleted_user(accounts, store):
    user, token = accounts.register("goose", "honkhonk")
    store.db.delete(user)
    store.db.commit()
    with pytest.raises(NotFound):
        accounts.current_user(token)
