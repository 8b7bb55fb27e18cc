"""
Unit tests for the auth module.
"""

import json

import pytest

from kgiton.errors import AuthenticationError, ValidationError
from kgiton.modules.auth import AuthModule

from conftest import fail, ok


@pytest.fixture
def login_payload():
    """Login response data."""
    return {
        "access_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9.test.signature",
        "user": {"id": "user-123", "name": "Budi", "email": "budi@example.com", "role": "user"}
    }


class TestAuthModule:
    """Test cases for AuthModule."""

    @pytest.mark.asyncio
    async def test_login_installs_token_for_next_call(self, make_client, fake_api, login_payload):
        """The very next call after login carries the bearer token."""
        fake_api.add("POST", "/api/auth/login", ok(login_payload))
        fake_api.add("GET", "/api/user/profile", ok({"id": "user-123"}))
        client = make_client()
        auth = AuthModule(client)

        result = await auth.login("budi@example.com", "secret")
        await client.get("/api/user/profile")

        assert result.access_token == login_payload["access_token"]
        assert result.user.id == "user-123"
        login_request, profile_request = fake_api.requests
        assert "authorization" not in login_request.headers
        assert json.loads(login_request.content) == {"email": "budi@example.com", "password": "secret"}
        assert profile_request.headers["authorization"] == f"Bearer {login_payload['access_token']}"

    @pytest.mark.asyncio
    async def test_login_without_token_leaves_auth_untouched(self, kgiton, fake_api):
        fake_api.add("POST", "/api/auth/login", ok({"user": {"id": "user-123"}}))

        result = await kgiton.auth.login("budi@example.com", "secret")

        assert result.access_token is None
        assert kgiton.config.access_token is None

    @pytest.mark.asyncio
    async def test_login_failure_propagates(self, kgiton, fake_api):
        fake_api.add("POST", "/api/auth/login", fail(401, error="Invalid credentials"))

        with pytest.raises(AuthenticationError) as exc_info:
            await kgiton.auth.login("budi@example.com", "wrong")

        assert exc_info.value.message == "Invalid credentials"
        assert kgiton.config.access_token is None

    @pytest.mark.asyncio
    async def test_register(self, kgiton, fake_api):
        fake_api.add(
            "POST", "/api/auth/register",
            ok({"message": "Registered", "user": {"id": "user-9", "email": "new@example.com"}})
        )

        result = await kgiton.auth.register("New User", "new@example.com", "pw12345678",
                                            phone_number="08123456789")

        assert result.user.email == "new@example.com"
        assert json.loads(fake_api.last_request.content) == {
            "name": "New User",
            "email": "new@example.com",
            "password": "pw12345678",
            "phone_number": "08123456789",
        }

    @pytest.mark.asyncio
    async def test_register_validation_error(self, kgiton, fake_api):
        fake_api.add("POST", "/api/auth/register", fail(400, error="Email already registered"))

        with pytest.raises(ValidationError):
            await kgiton.auth.register("A", "dup@example.com", "pw")

    @pytest.mark.asyncio
    async def test_forgot_password(self, kgiton, fake_api):
        fake_api.add("POST", "/api/auth/forgot-password", ok(message="Email sent"))

        assert await kgiton.auth.forgot_password("budi@example.com") is None
        assert json.loads(fake_api.last_request.content) == {"email": "budi@example.com"}

    def test_logout_clears_credentials(self, kgiton):
        kgiton.auth.set_access_token("jwt")

        kgiton.auth.logout()

        assert kgiton.config.api_key is None
        assert kgiton.config.access_token is None

    def test_setters_forward_to_gateway(self, kgiton):
        kgiton.auth.set_api_key("kgiton_other")
        kgiton.auth.set_access_token("jwt")

        assert kgiton.config.api_key == "kgiton_other"
        assert kgiton.config.access_token == "jwt"
