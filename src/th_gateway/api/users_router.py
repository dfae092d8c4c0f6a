"""Users API router: public profiles and stats updates.

GET   /users               every user's public projection
GET   /users/{user_id}     one user's public projection
PATCH /users/{user_id}/stats partial stats overwrite (auth required)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.th_common.database import get_db_session
from src.th_common.response import ApiResponse, success_response
from src.th_gateway.api.router import get_user_service
from src.th_gateway.auth.dependencies import get_current_user_id
from src.th_gateway.user.schemas import PublicUser, StatsUpdateRequest
from src.th_gateway.user.service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("")
async def list_users(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> ApiResponse:
    users = await service.list_all(db)
    resp = success_response(
        users=[PublicUser.from_model(u).model_dump(by_alias=True) for u in users]
    )
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/{user_id}")
async def get_user(
    user_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> ApiResponse:
    user = await service.get_by_id(user_id, db)
    resp = success_response(user=PublicUser.from_model(user).model_dump(by_alias=True))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.patch("/{user_id}/stats")
async def update_stats(
    user_id: str,
    body: StatsUpdateRequest,
    request: Request,
    _caller_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> ApiResponse:
    user = await service.update_stats(user_id, body.changes(), db)
    resp = success_response(user=PublicUser.from_model(user).model_dump(by_alias=True))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
