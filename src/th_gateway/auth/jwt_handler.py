"""Bearer token creation and verification.

Tokens are HS256 JWTs signed with the process-wide JWT_SECRET and carry
{sub: user_id, type: "access", iat, exp}. Lifetime defaults to 7 days.

NOTE: No token revocation. Logout flips the user offline and the client
drops its copy, but the token itself stays valid until `exp`. For
production, add a jti claim and a server-side deny list.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.th_common.errors import InvalidTokenError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"
_TOKEN_EXPIRE = timedelta(days=settings.JWT_EXPIRE_DAYS)


def create_access_token(user_id: str) -> str:
    """Issue a bearer token for `user_id`."""
    now = datetime.now(UTC)
    payload = {
        "sub": user_id,
        "type": "access",
        "iat": now,
        "exp": now + _TOKEN_EXPIRE,
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def decode_token(token: str) -> str:
    """Validate a bearer token and return the user id it was issued for.

    Raises:
        InvalidTokenError: malformed, tampered, expired, or not an access token.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidTokenError() from None

    if payload.get("type") != "access":
        raise InvalidTokenError()

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise InvalidTokenError()
    return user_id
