from jose import jwt, JWTError
from dataclasses import dataclass
from typing import Optional

from ..config import get_settings
from ..errors import ConfigurationError


@dataclass(frozen=True)
class CallerIdentity:
    user_id: str
    email: str = ""
    role: str = ""


def bearer_token(auth_header: Optional[str]) -> Optional[str]:
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    token = auth_header.split(" ", 1)[1].strip()
    return token or None


class JWTIdentityResolver:
    """Resolves the caller from a bearer access token signed with the shared JWT secret."""

    def __init__(self, secret: str, algorithm: str = "HS256"):
        self.secret = secret
        self.algorithm = algorithm

    async def resolve(self, auth_header: Optional[str]) -> Optional[CallerIdentity]:
        """
        Verify the Authorization header.

        Returns the identity if valid, None if absent, malformed, invalid or expired.
        """
        if not self.secret:
            raise ConfigurationError("JWT secret not configured")

        token = bearer_token(auth_header)
        if token is None:
            return None

        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"verify_aud": False},
            )
        except JWTError:
            return None

        subject = payload.get("sub")
        if not subject:
            return None

        return CallerIdentity(
            user_id=str(subject),
            email=payload.get("email", "") or "",
            role=payload.get("role", "") or "",
        )


def get_identity_resolver() -> JWTIdentityResolver:
    settings = get_settings()
    return JWTIdentityResolver(settings.jwt_secret, algorithm=settings.jwt_algorithm)
