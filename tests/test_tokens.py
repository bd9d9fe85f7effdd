"""
Tests for JWT issuance and validation
"""
import base64
import json
from datetime import datetime, timedelta
from types import SimpleNamespace
from uuid import uuid4

import jwt
import pytest
from dateutil.tz import tzutc

from pbank.errors import TokenExpired, TokenInvalid
from pbank.services.tokens import TokenIssuer, UserIdentity

SECRET = "unit-test-secret-0123456789abcdef0123"


class FakeClock:
    def __init__(self):
        self.current = datetime(2025, 6, 26, 12, 0, tzinfo=tzutc())

    def __call__(self):
        return self.current

    def advance(self, **kwargs):
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def issuer(clock):
    return TokenIssuer(SECRET, ttl=timedelta(hours=1), now=clock)


@pytest.fixture
def user():
    return SimpleNamespace(id=uuid4(), username="admin")


def test_issued_token_validates(issuer, user):
    identity = issuer.validate(issuer.issue(user))
    assert identity == UserIdentity(user_id=user.id, username="admin")


def test_token_carries_subject_and_expiry(issuer, user, clock):
    claims = jwt.decode(
        issuer.issue(user), SECRET, algorithms=["HS256"], options={"verify_exp": False}
    )
    assert claims["sub"] == str(user.id)
    assert claims["exp"] == int((clock.current + timedelta(hours=1)).timestamp())


def test_token_expires(issuer, user, clock):
    token = issuer.issue(user)
    issuer.validate(token)

    clock.advance(minutes=59)
    issuer.validate(token)

    clock.advance(minutes=1)
    with pytest.raises(TokenExpired):
        issuer.validate(token)


def test_wrong_secret_is_invalid(issuer, user, clock):
    other = TokenIssuer("another-secret-0123456789abcdef01234", now=clock)
    with pytest.raises(TokenInvalid):
        issuer.validate(other.issue(user))


def test_tampered_payload_is_invalid(issuer, user):
    header, payload, signature = issuer.issue(user).split(".")
    claims = json.loads(base64.urlsafe_b64decode(payload + "=" * (-len(payload) % 4)))
    claims["sub"] = str(uuid4())
    forged = base64.urlsafe_b64encode(json.dumps(claims).encode()).rstrip(b"=").decode()

    with pytest.raises(TokenInvalid):
        issuer.validate(".".join([header, forged, signature]))


@pytest.mark.parametrize("token", ["", "not-a-token", "a.b.c"])
def test_malformed_token_is_invalid(issuer, token):
    with pytest.raises(TokenInvalid):
        issuer.validate(token)


def test_missing_expiry_is_invalid(issuer):
    token = jwt.encode({"sub": str(uuid4())}, SECRET, algorithm="HS256")
    with pytest.raises(TokenInvalid):
        issuer.validate(token)


def test_non_uuid_subject_is_invalid(issuer, clock):
    exp = int((clock.current + timedelta(hours=1)).timestamp())
    token = jwt.encode({"sub": "admin", "exp": exp}, SECRET, algorithm="HS256")
    with pytest.raises(TokenInvalid):
        issuer.validate(token)


def test_expired_and_invalid_look_the_same():
    assert TokenExpired.code == TokenInvalid.code
    assert TokenExpired.public_detail == TokenInvalid.public_detail
    assert TokenExpired.status_code == TokenInvalid.status_code == 401


def test_empty_secret_rejected():
    with pytest.raises(ValueError):
        TokenIssuer("")
