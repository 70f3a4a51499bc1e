"""Access Tokens — verifies JWT issue/verify and principal construction.

Tests:
    - Round trip keeps user id and the site-admin flag
    - Expired, tampered and non-numeric-subject tokens raise AuthenticationError
    - Only a literal `true` is_admin claim grants site admin
"""

import pytest
from jose import jwt

from shelterhub.config import get_settings
from shelterhub.core.errors import AuthenticationError
from shelterhub.infrastructure.security import create_access_token, decode_access_token


def test_round_trip():
    principal = decode_access_token(create_access_token(42, is_admin=True))
    assert principal.user_id == 42
    assert principal.is_site_admin is True


def test_expired_token_is_rejected():
    token = create_access_token(42, expires_minutes=-1)
    with pytest.raises(AuthenticationError):
        decode_access_token(token)


def test_tampered_token_is_rejected():
    header, _, signature = create_access_token(42).split(".")
    _, forged_payload, _ = create_access_token(1, is_admin=True).split(".")
    with pytest.raises(AuthenticationError):
        decode_access_token(".".join([header, forged_payload, signature]))


def test_non_numeric_subject_is_rejected():
    settings = get_settings()
    token = jwt.encode({"sub": "alice"}, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    with pytest.raises(AuthenticationError):
        decode_access_token(token)


def test_truthy_string_admin_claim_is_not_admin():
    settings = get_settings()
    token = jwt.encode(
        {"sub": "7", "is_admin": "yes"}, settings.jwt_secret, algorithm=settings.jwt_algorithm,
    )
    assert decode_access_token(token).is_site_admin is False
