"""th_trade REST endpoints.

GET  /trades               every post, newest first
GET  /trades/user/{id}     one author's posts
POST /trades               create a post as the token's user
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.th_common.database import get_db_session
from src.th_common.response import ApiResponse, success_response
from src.th_gateway.auth.dependencies import get_current_user
from src.th_gateway.user.db_models import UserModel
from src.th_notification.api.router import get_notification_service
from src.th_trade.application.schemas import CreateTradeRequest, TradeOut
from src.th_trade.application.service import TradeApplicationService

router = APIRouter(prefix="/trades", tags=["trades"])

_service = TradeApplicationService(notifications=get_notification_service())


def get_trade_service() -> TradeApplicationService:
    return _service


@router.get("")
async def list_trades(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    trades = await _service.list_all(db)
    resp = success_response(trades=[TradeOut.from_domain(t).model_dump(by_alias=True) for t in trades])
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/user/{user_id}")
async def list_user_trades(
    user_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    trades = await _service.list_by_author(db, user_id)
    resp = success_response(trades=[TradeOut.from_domain(t).model_dump(by_alias=True) for t in trades])
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_trade(
    body: CreateTradeRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    trade = await _service.create(db, current_user, body)
    resp = success_response(
        "Trade created successfully",
        trade=TradeOut.from_domain(trade).model_dump(by_alias=True),
    )
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
