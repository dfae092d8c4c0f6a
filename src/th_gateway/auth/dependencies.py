"""FastAPI dependencies for protected endpoints.

Usage in any protected router:
    from src.th_gateway.auth.dependencies import get_current_user

    @router.get("/protected")
    async def protected(user: UserModel = Depends(get_current_user)):
        ...

Contract: no bearer token → 401 (TokenMissingError); malformed, tampered
or expired token → 403 (InvalidTokenError); token for a user that no
longer exists → 404 (UserNotFoundError).
"""

from typing import Annotated

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.th_common.database import get_db_session
from src.th_common.errors import TokenMissingError, UserNotFoundError
from src.th_gateway.auth.jwt_handler import decode_token
from src.th_gateway.user.db_models import UserModel

# auto_error=False: a missing token must surface as our 401 envelope, not FastAPI's
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/auth/login", auto_error=False
)


async def get_current_user_id(
    token: Annotated[str | None, Depends(oauth2_scheme)],
) -> str:
    """Resolve the acting user id from the Bearer token without touching the DB."""
    if not token:
        raise TokenMissingError()
    return decode_token(token)


async def get_current_user(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> UserModel:
    """Load the UserModel the token was issued for."""
    user = await db.get(UserModel, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user
