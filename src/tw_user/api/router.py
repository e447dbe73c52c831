"""tw_user REST endpoints.

GET /users/{wallet}            — profile and betting record
PUT /users/{wallet}            — set username
GET /users/leaderboard/top     — ranked by win rate, then volume
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.container import get_user_service
from src.tw_common.database import get_db_session
from src.tw_common.enums import LeaderboardPeriod
from src.tw_common.response import ApiResponse, success_response
from src.tw_user.application.schemas import UsernameUpdateRequest
from src.tw_user.application.service import UserApplicationService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/leaderboard/top")
async def leaderboard(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[UserApplicationService, Depends(get_user_service)],
    limit: int = Query(50, ge=1, le=100),
    period: LeaderboardPeriod = Query(LeaderboardPeriod.ALL),
) -> ApiResponse:
    return success_response(await service.leaderboard(db, limit, period), request)


@router.get("/{wallet}")
async def get_profile(
    wallet: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[UserApplicationService, Depends(get_user_service)],
) -> ApiResponse:
    return success_response(await service.get_profile(db, wallet), request)


@router.put("/{wallet}")
async def set_username(
    wallet: str,
    body: UsernameUpdateRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[UserApplicationService, Depends(get_user_service)],
) -> ApiResponse:
    return success_response(await service.set_username(db, wallet, body), request)
