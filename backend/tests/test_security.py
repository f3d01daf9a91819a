"""
Password hashing, token issuing/validation and the Authorization header gate.
"""

from datetime import timedelta
from types import SimpleNamespace

import jwt
import pytest

from core.errors import ExpiredTokenError, InvalidTokenError, MissingTokenError
from core.security import PasswordHasher, TokenService, authenticate

SECRET = "unit-test-secret"
LIFETIME = timedelta(hours=1)


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=1000)


@pytest.fixture
def tokens(clock):
    return TokenService(secret=SECRET, lifetime=LIFETIME, clock=clock)


@pytest.fixture
def user():
    return SimpleNamespace(id=7, email="ana@x.com", role="user")


def _flip(segment: str, index: int) -> str:
    replacement = "A" if segment[index] != "A" else "B"
    return segment[:index] + replacement + segment[index + 1:]


# =============================================================================
# Password hashing
# =============================================================================


class TestPasswordHasher:
    def test_same_password_hashes_differently_but_both_verify(self, hasher):
        first = hasher.hash("secret1")
        second = hasher.hash("secret1")

        assert first != second
        assert hasher.verify("secret1", first)
        assert hasher.verify("secret1", second)

    def test_hash_does_not_contain_plaintext(self, hasher):
        assert "secret1" not in hasher.hash("secret1")

    @pytest.mark.parametrize("other", ["secret2", "Secret1", "secret1 ", "", "s"])
    def test_other_passwords_do_not_verify(self, hasher, other):
        stored = hasher.hash("secret1")
        assert hasher.verify(other, stored) is False

    @pytest.mark.parametrize(
        "stored",
        [
            "",
            None,
            "plaintext",
            "$pbkdf2-sha256$broken",
            "$2a$10$92IXUNpkjO0rOQ5byMi.Ye4oKoEa3Ro9llC/.og/at2.uheWG/igi",
        ],
    )
    def test_malformed_stored_hash_is_false_not_an_error(self, hasher, stored):
        assert hasher.verify("password", stored) is False

    def test_hash_from_other_round_count_still_verifies(self, hasher):
        stored = PasswordHasher(rounds=2000).hash("secret1")
        assert hasher.verify("secret1", stored)


# =============================================================================
# Token service
# =============================================================================


class TestTokenService:
    def test_issue_then_validate_returns_claims(self, tokens, user, clock):
        claims = tokens.validate(tokens.issue(user))

        assert claims.id == 7
        assert claims.email == "ana@x.com"
        assert claims.role == "user"
        assert claims.issued_at == clock.now
        assert claims.expires_at == clock.now + LIFETIME

    def test_valid_just_before_expiry(self, tokens, user, clock):
        token = tokens.issue(user)
        clock.advance(seconds=LIFETIME.total_seconds() - 1)

        assert tokens.validate(token).id == user.id

    def test_expired_just_after_expiry(self, tokens, user, clock):
        token = tokens.issue(user)
        clock.advance(seconds=LIFETIME.total_seconds() + 1)

        with pytest.raises(ExpiredTokenError):
            tokens.validate(token)

    def test_expired_exactly_at_expiry(self, tokens, user, clock):
        token = tokens.issue(user)
        clock.advance(seconds=LIFETIME.total_seconds())

        with pytest.raises(ExpiredTokenError):
            tokens.validate(token)

    @pytest.mark.parametrize("position", [0, 5, 17, 30])
    def test_tampered_payload_is_rejected(self, tokens, user, position):
        header, payload, signature = tokens.issue(user).split(".")
        forged = ".".join([header, _flip(payload, position), signature])

        with pytest.raises(InvalidTokenError):
            tokens.validate(forged)

    @pytest.mark.parametrize("position", [0, 10, 21, 40])
    def test_tampered_signature_is_rejected(self, tokens, user, position):
        header, payload, signature = tokens.issue(user).split(".")
        forged = ".".join([header, payload, _flip(signature, position)])

        with pytest.raises(InvalidTokenError):
            tokens.validate(forged)

    def test_role_cannot_be_escalated_by_editing_claims(self, tokens, user, clock):
        token = tokens.issue(user)
        claims = jwt.decode(token, options={"verify_signature": False})
        claims["role"] = "admin"
        forged = jwt.encode(claims, "some-other-secret", algorithm="HS256")

        with pytest.raises(InvalidTokenError):
            tokens.validate(forged)

    def test_token_from_another_secret_is_rejected(self, user, clock):
        other = TokenService(secret="rotated", lifetime=LIFETIME, clock=clock)
        token = other.issue(user)

        with pytest.raises(InvalidTokenError):
            TokenService(secret=SECRET, lifetime=LIFETIME, clock=clock).validate(token)

    def test_any_service_with_same_secret_validates(self, tokens, user, clock):
        peer = TokenService(secret=SECRET, lifetime=timedelta(minutes=5), clock=clock)
        assert peer.validate(tokens.issue(user)).email == user.email

    def test_missing_claim_is_rejected(self, tokens, clock):
        now = int(clock.now.timestamp())
        token = jwt.encode({"id": 1, "email": "a@b.com", "iat": now, "exp": now + 60}, SECRET, algorithm="HS256")

        with pytest.raises(InvalidTokenError):
            tokens.validate(token)

    def test_none_algorithm_is_rejected(self, tokens, clock):
        now = int(clock.now.timestamp())
        token = jwt.encode(
            {"id": 1, "email": "a@b.com", "role": "admin", "iat": now, "exp": now + 60},
            None,
            algorithm="none",
        )

        with pytest.raises(InvalidTokenError):
            tokens.validate(token)

    @pytest.mark.parametrize("garbage", ["", "abc", "a.b.c", "....."])
    def test_garbage_is_invalid(self, tokens, garbage):
        with pytest.raises(InvalidTokenError):
            tokens.validate(garbage)

    def test_empty_secret_is_refused(self):
        with pytest.raises(ValueError):
            TokenService(secret="", lifetime=LIFETIME)


# =============================================================================
# Auth gate
# =============================================================================


class TestAuthenticate:
    @pytest.mark.parametrize("token", [None, "", "   "])
    def test_missing_token(self, tokens, token):
        with pytest.raises(MissingTokenError):
            authenticate(token, tokens)

    def test_missing_token_does_not_reach_token_service(self):
        class Exploding:
            def validate(self, token):
                raise AssertionError("token service must not be called")

        with pytest.raises(MissingTokenError):
            authenticate(None, Exploding())

    def test_valid_token(self, tokens, user):
        assert authenticate(tokens.issue(user), tokens).id == user.id

    def test_expired_token_reported_as_invalid(self, tokens, user, clock):
        token = tokens.issue(user)
        clock.advance(hours=2)

        with pytest.raises(InvalidTokenError) as excinfo:
            authenticate(token, tokens)
        assert not isinstance(excinfo.value, ExpiredTokenError)

    def test_forged_token_reported_as_invalid(self, tokens):
        with pytest.raises(InvalidTokenError):
            authenticate("not.a.token", tokens)
