"""th_notification REST endpoints: all require a Bearer token.

GET   /notifications                caller's notifications, newest first
GET   /notifications/unread-count   caller's unread count
PATCH /notifications/read-all       mark all of the caller's notifications read
PATCH /notifications/{id}/read      mark one of the caller's notifications read
POST  /notifications                send a notification to any existing user
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.th_common.database import get_db_session
from src.th_common.response import ApiResponse, success_response
from src.th_gateway.api.router import get_user_service
from src.th_gateway.auth.dependencies import get_current_user_id
from src.th_gateway.user.service import UserService
from src.th_notification.application.schemas import (
    CreateNotificationRequest,
    NotificationOut,
)
from src.th_notification.application.service import NotificationApplicationService

router = APIRouter(prefix="/notifications", tags=["notifications"])

_service = NotificationApplicationService()


def get_notification_service() -> NotificationApplicationService:
    """Process-wide notification store, shared with trade creation."""
    return _service


@router.get("")
async def list_notifications(
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    items = await _service.list_by_user(db, user_id)
    resp = success_response(
        notifications=[NotificationOut.from_domain(n).model_dump(by_alias=True) for n in items]
    )
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/unread-count")
async def unread_count(
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    count = await _service.unread_count(db, user_id)
    resp = success_response(count=count)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.patch("/read-all")
async def mark_all_read(
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    await _service.mark_all_read(db, user_id)
    resp = success_response("All notifications marked as read")
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.patch("/{notification_id}/read")
async def mark_read(
    notification_id: str,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    await _service.mark_read(db, user_id, notification_id)
    resp = success_response("Notification marked as read")
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_notification(
    body: CreateNotificationRequest,
    request: Request,
    _caller_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    users: Annotated[UserService, Depends(get_user_service)],
) -> ApiResponse:
    await users.get_by_id(body.user_id, db)
    notification = await _service.create(
        db, body.user_id, body.title, body.message, body.type, body.action_url
    )
    resp = success_response(
        notification=NotificationOut.from_domain(notification).model_dump(by_alias=True)
    )
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
