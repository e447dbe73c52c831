"""JWT access tokens for the admin console.

HS256 (symmetric HMAC) with JWT_SECRET. Tokens carry the admin username in
"sub" and a "role" claim; there is no refresh token, the admin logs in again
after JWT_EXPIRE_MINUTES.

JwtHandler is built once per app by build_services() from the injected
Settings and reached through app.state.services.jwt.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from src.tw_common.errors import InvalidCredentialsError

ADMIN_ROLE = "admin"


class JwtHandler:
    def __init__(self, secret: str, algorithm: str = "HS256", expire_minutes: int = 30) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._access_expire = timedelta(minutes=expire_minutes)

    @property
    def expires_in_seconds(self) -> int:
        return int(self._access_expire.total_seconds())

    def create_access_token(self, subject: str, role: str = ADMIN_ROLE) -> str:
        now = datetime.now(UTC)
        payload = {
            "sub": subject,
            "role": role,
            "type": "access",
            "iat": now,
            "exp": now + self._access_expire,
        }
        return str(jwt.encode(payload, self._secret, algorithm=self._algorithm))

    def decode_token(self, token: str) -> dict[str, Any]:
        """Decode and validate an access token.

        Raises:
            InvalidCredentialsError: bad signature, expired, or not an access token.
        """
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],  # Explicit list prevents algorithm confusion
            )
        except JWTError:
            raise InvalidCredentialsError() from None

        if payload.get("type") != "access" or not payload.get("sub"):
            raise InvalidCredentialsError()
        return payload
