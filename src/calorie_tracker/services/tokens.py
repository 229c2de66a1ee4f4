"""Access token issuance and verification."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import UUID

import jwt

from calorie_tracker.domain.models import Principal, Role, UserRecord
from calorie_tracker.errors import Unauthorized


@dataclass
class TokenService:
    """Issues and verifies signed JWT access tokens."""

    secret: str
    algorithm: str = "HS256"
    ttl_minutes: int | None = None

    def issue(self, user: UserRecord) -> str:
        """Return a signed token identifying the user and role."""
        now = datetime.now(tz=UTC)
        claims: dict[str, object] = {
            "sub": str(user.id),
            "email": user.email,
            "role": user.role.value,
            "iat": now,
        }
        if self.ttl_minutes:
            claims["exp"] = now + timedelta(minutes=self.ttl_minutes)
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> Principal:
        """Verify a token and return the caller it identifies."""
        try:
            claims = jwt.decode(token, self.secret, algorithms=[self.algorithm])
            return Principal(
                user_id=UUID(str(claims["sub"])),
                email=str(claims.get("email", "")),
                role=Role(claims["role"]),
            )
        except (jwt.InvalidTokenError, KeyError, ValueError) as exc:
            raise Unauthorized("Authentication Failed") from exc
