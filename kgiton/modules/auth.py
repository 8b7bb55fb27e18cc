"""
Authentication endpoints: login, register, forgot password.
"""

from typing import Optional

from kgiton.models import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse
from kgiton.modules.base import BaseModule


class AuthModule(BaseModule):
    """Login, registration and local credential management."""

    name = "auth"

    async def login(self, email: str, password: str) -> Optional[LoginResponse]:
        """Log in with email and password.

        On success the returned access token is installed on the gateway
        before this method returns, so the next call is authenticated.
        """
        request = LoginRequest(email=email, password=password)
        response = await self.http_client.post("/api/auth/login", request.to_payload())
        result = self._unwrap(response, LoginResponse)

        if result is not None and result.access_token:
            self.http_client.set_access_token(result.access_token)
            self.logger.info("Logged in", user_id=result.user.id if result.user else None)

        return result

    async def register(self, name: str, email: str, password: str,
                       phone_number: Optional[str] = None,
                       referral_code: Optional[str] = None) -> Optional[RegisterResponse]:
        request = RegisterRequest(
            name=name,
            email=email,
            password=password,
            phone_number=phone_number,
            referral_code=referral_code
        )
        response = await self.http_client.post("/api/auth/register", request.to_payload())
        return self._unwrap(response, RegisterResponse)

    async def forgot_password(self, email: str) -> None:
        """Request a password reset email."""
        await self.http_client.post("/api/auth/forgot-password", {"email": email})

    def logout(self) -> None:
        """Clear local credentials. The server-side session is untouched."""
        self.http_client.clear_auth()

    def set_access_token(self, token: str) -> None:
        self.http_client.set_access_token(token)

    def set_api_key(self, api_key: str) -> None:
        self.http_client.set_api_key(api_key)
