"""Auth API router: register, login, me, logout.

All endpoints return ApiResponse with payload keys at the top level.
request_id is read from request.state (injected by RequestLogMiddleware).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.th_common.database import get_db_session
from src.th_common.response import ApiResponse, success_response
from src.th_gateway.auth.dependencies import get_current_user
from src.th_gateway.auth.jwt_handler import create_access_token
from src.th_gateway.user.db_models import UserModel
from src.th_gateway.user.schemas import AccountUser, LoginRequest, RegisterRequest
from src.th_gateway.user.service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])
_service = UserService()


def get_user_service() -> UserService:
    """Process-wide credential store, shared with the users router."""
    return _service


def _get_request_id(request: Request) -> str:
    """Read request_id injected by RequestLogMiddleware, fallback if absent."""
    return getattr(request.state, "request_id", "req_unknown")


def _session_response(request: Request, user: UserModel, message: str) -> ApiResponse:
    resp = success_response(
        message,
        user=AccountUser.from_model(user).model_dump(by_alias=True),
        token=create_access_token(user.id),
    )
    resp.request_id = _get_request_id(request)
    return resp


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    summary="User registration",
)
async def register(
    request: Request,
    body: RegisterRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    user = await _service.register(
        body.username,
        body.display_name,
        body.email,
        body.password,
        body.confirm_password,
        db,
    )
    return _session_response(request, user, "Account created successfully!")


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="User login",
)
async def login(
    request: Request,
    body: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    user = await _service.authenticate(body.username, body.password, db)
    return _session_response(request, user, "Login successful!")


@router.get("/me", response_model=ApiResponse, summary="Current user")
async def me(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
) -> ApiResponse:
    resp = success_response(user=AccountUser.from_model(current_user).model_dump(by_alias=True))
    resp.request_id = _get_request_id(request)
    return resp


@router.post("/logout", response_model=ApiResponse, summary="Logout")
async def logout(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    # The token stays valid until expiry; the client is expected to discard it
    await _service.set_online(current_user.id, False, db)
    resp = success_response("Logged out successfully")
    resp.request_id = _get_request_id(request)
    return resp
