"""
Tests for token and password helpers.
"""
from datetime import timedelta

from kitadocs.core.security import (
    AccountRole, ACCESS_TOKEN_TYPE, PASSWORD_RESET_TOKEN_TYPE,
    create_access_token, create_password_reset_token, verify_token,
    hash_password, verify_password, check_account_password, generate_initial_password
)


def test_access_token_claims():
    payload = verify_token(create_access_token(7, AccountRole.DOCTOR))
    assert payload["id"] == 7
    assert payload["role"] == "doctor"
    assert payload["type"] == ACCESS_TOKEN_TYPE


def test_access_token_lasts_thirty_days():
    payload = verify_token(create_access_token(1, AccountRole.USER))
    reset = verify_token(create_password_reset_token("a@example.com", AccountRole.USER))
    # Session tokens outlive reset tokens by roughly 30 days minus an hour
    assert payload["exp"] - reset["exp"] > timedelta(days=29).total_seconds()


def test_reset_token_claims():
    payload = verify_token(create_password_reset_token("doc@example.com", AccountRole.DOCTOR))
    assert payload["email"] == "doc@example.com"
    assert payload["role"] == "doctor"
    assert payload["type"] == PASSWORD_RESET_TOKEN_TYPE


def test_expired_token_is_rejected():
    token = create_password_reset_token("a@example.com", AccountRole.USER, expires_delta=timedelta(minutes=-1))
    assert verify_token(token) is None


def test_tampered_token_is_rejected():
    token = create_access_token(1, AccountRole.USER)
    assert verify_token(token[:-2] + "xx") is None


def test_hash_and_verify_password():
    hashed = hash_password("correct horse")
    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)


def test_verify_password_handles_unhashed_value():
    assert verify_password("plain", "plain") is False


def test_initial_password_compared_directly():
    issued = generate_initial_password()
    assert len(issued) == 32
    assert check_account_password(issued, issued, is_initial=True)
    assert not check_account_password("guess", issued, is_initial=True)


def test_non_initial_password_uses_bcrypt():
    hashed = hash_password("new-password")
    assert check_account_password("new-password", hashed, is_initial=False)
    # A hash must never be accepted as a plaintext match once the account is not initial
    assert not check_account_password(hashed, hashed, is_initial=False)
