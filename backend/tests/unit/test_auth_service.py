"""
Tests for AuthService: registration, login and token validation.
"""

import jwt
import pytest
from pydantic import ValidationError

from nooklet.errors import AuthError
from nooklet.models import LoginRequest, RegisterRequest


def _register_request(email="reader@example.com", username=None):
    return RegisterRequest(
        email=email,
        password="correct-horse",
        password_confirmation="correct-horse",
        username=username,
    )


class TestRegister:

    async def test_creates_user_and_profile(self, auth_service, profile_service):
        user, profile = await auth_service.register(_register_request(email="  Reader@Example.com "))

        assert user.email == "reader@example.com"
        assert user.password_hash != "correct-horse"
        assert profile.auth_user_id == user.id
        assert await profile_service.resolve_owner_id(user.id) == profile.id

    async def test_duplicate_email_conflicts(self, auth_service):
        await auth_service.register(_register_request())

        with pytest.raises(AuthError) as exc_info:
            await auth_service.register(_register_request(email="READER@example.com"))
        assert exc_info.value.code == "EMAIL_TAKEN"
        assert exc_info.value.status_code == 409

    async def test_duplicate_username_conflicts_and_rolls_back(self, auth_service):
        await auth_service.register(_register_request(username="quill"))

        with pytest.raises(AuthError) as exc_info:
            await auth_service.register(_register_request(email="second@example.com", username="quill"))
        assert exc_info.value.code == "USERNAME_TAKEN"
        assert await auth_service.get_user_by_email("second@example.com") is None

    def test_password_confirmation_must_match(self):
        with pytest.raises(ValidationError):
            RegisterRequest(email="a@example.com", password="correct-horse", password_confirmation="nope-nope")

    def test_password_minimum_length(self):
        with pytest.raises(ValidationError):
            RegisterRequest(email="a@example.com", password="short", password_confirmation="short")

    def test_email_must_look_like_an_address(self):
        with pytest.raises(ValidationError):
            _register_request(email="not-an-email")


class TestLogin:

    async def test_valid_credentials_issue_token(self, auth_service):
        user, _ = await auth_service.register(_register_request())

        token = await auth_service.login(LoginRequest(email="reader@example.com", password="correct-horse"))
        assert token.token_type == "bearer"
        assert auth_service.validate_token(token.access_token).user_id == user.id

    async def test_wrong_password(self, auth_service):
        await auth_service.register(_register_request())

        with pytest.raises(AuthError) as exc_info:
            await auth_service.login(LoginRequest(email="reader@example.com", password="wrong-horse"))
        assert exc_info.value.code == "INVALID_CREDENTIALS"
        assert exc_info.value.status_code == 401

    async def test_unknown_email(self, auth_service):
        with pytest.raises(AuthError) as exc_info:
            await auth_service.login(LoginRequest(email="ghost@example.com", password="whatever"))
        assert exc_info.value.code == "INVALID_CREDENTIALS"


class TestValidateToken:

    def test_garbage_token(self, auth_service):
        with pytest.raises(AuthError) as exc_info:
            auth_service.validate_token("not-a-jwt")
        assert exc_info.value.code == "INVALID_TOKEN"

    def test_wrong_secret(self, auth_service):
        token = jwt.encode({"sub": "someone"}, "another-secret", algorithm="HS256")

        with pytest.raises(AuthError) as exc_info:
            auth_service.validate_token(token)
        assert exc_info.value.code == "INVALID_TOKEN"

    def test_expired_token(self, auth_service):
        token = jwt.encode({"sub": "someone", "exp": 1}, auth_service.secret_key, algorithm="HS256")

        with pytest.raises(AuthError) as exc_info:
            auth_service.validate_token(token)
        assert exc_info.value.code == "TOKEN_EXPIRED"

    def test_missing_subject(self, auth_service):
        token = jwt.encode({"scope": "none"}, auth_service.secret_key, algorithm="HS256")

        with pytest.raises(AuthError) as exc_info:
            auth_service.validate_token(token)
        assert exc_info.value.code == "INVALID_TOKEN"
