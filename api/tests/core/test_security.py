import base64

from core.security import (
    create_session_token,
    get_password_hash,
    parse_basic_authorization,
    verify_password,
)


def _basic(raw: str) -> str:
    return "Basic " + base64.b64encode(raw.encode()).decode()


def test_verify_password_returns_false_for_invalid_hash() -> None:
    assert verify_password("123456", "plain-text-password") is False


def test_password_hash_round_trip() -> None:
    hashed = get_password_hash("toto1234!")

    assert hashed != "toto1234!"
    assert verify_password("toto1234!", hashed) is True
    assert verify_password("wrong", hashed) is False


def test_parse_basic_authorization() -> None:
    assert parse_basic_authorization(_basic("bob@dylan.com:toto1234!")) == (
        "bob@dylan.com",
        "toto1234!",
    )


def test_parse_basic_authorization_password_with_colon() -> None:
    assert parse_basic_authorization(_basic("bob@dylan.com:a:b")) == ("bob@dylan.com", "a:b")


def test_parse_basic_authorization_rejects_malformed() -> None:
    assert parse_basic_authorization(None) is None
    assert parse_basic_authorization("") is None
    assert parse_basic_authorization("Bearer abc") is None
    assert parse_basic_authorization("Basic !!!") is None
    assert parse_basic_authorization(_basic("no-colon")) is None
    assert parse_basic_authorization(_basic(":password")) is None
    assert parse_basic_authorization(_basic("bob@dylan.com:")) is None


def test_session_tokens_are_unique() -> None:
    assert create_session_token() != create_session_token()
