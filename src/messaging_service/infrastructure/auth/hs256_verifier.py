from __future__ import annotations

import jwt

from messaging_service.application.dto.principal import Principal


class HS256Verifier:
    """Verify JWTs signed with a shared HS256 secret.

    The subject is read from ``sub`` and falls back to ``userId``.
    """

    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        self._secret = secret
        self._algorithm = algorithm

    async def verify(self, token: str) -> Principal:
        payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        subject = payload.get("sub", payload.get("userId"))
        if subject is None:
            raise jwt.InvalidTokenError("Token has no subject")
        return Principal(
            user_id=int(subject),
            roles=payload.get("roles", []),
        )
