from __future__ import annotations

from typing import Any, Optional

import httpx
from pydantic import BaseModel, ValidationError


class AuthServiceError(RuntimeError):
    pass


class AuthUser(BaseModel):
    id: str
    username: str = ""
    email: str = ""


class AuthClient:
    """Resolves bearer tokens through the identity service's /auth/me endpoint."""

    def __init__(self, base_url: str, timeout: float = 5.0, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def get_me(self, token: str) -> AuthUser:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(
                    f"{self.base_url}/api/v1/auth/me",
                    headers={"Authorization": f"Bearer {token}"},
                )
        except httpx.HTTPError as exc:
            raise AuthServiceError(f"request auth service: {exc}") from exc

        if response.status_code == 401:
            raise AuthServiceError("invalid or expired token")
        if response.status_code != 200:
            raise AuthServiceError(f"auth service error: {response.status_code} - {response.text}")

        try:
            payload: Any = response.json()
            if isinstance(payload, dict) and payload.get("id") is not None:
                payload = {**payload, "id": str(payload["id"])}
            return AuthUser.model_validate(payload)
        except (ValueError, ValidationError) as exc:
            raise AuthServiceError("decode auth service response") from exc
