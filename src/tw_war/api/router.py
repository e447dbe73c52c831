"""tw_war REST endpoints (public).

GET  /wars                       — list, filter by status / active_only
POST /wars                       — submit a war for moderation (PENDING)
GET  /wars/creator/{wallet}      — wars submitted by a wallet
GET  /wars/{war_id}              — detail
GET  /wars/{war_id}/stats        — pool totals, bettors, odds

Admin creation, moderation and settlement live under /admin (tw_admin).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.container import get_war_service
from src.tw_common.database import get_db_session
from src.tw_common.enums import WarStatus
from src.tw_common.response import ApiResponse, success_response
from src.tw_war.application.schemas import CreateWarRequest
from src.tw_war.application.service import WarApplicationService

router = APIRouter(prefix="/wars", tags=["wars"])


@router.get("")
async def list_wars(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[WarApplicationService, Depends(get_war_service)],
    status: WarStatus | None = Query(None),
    active_only: bool = Query(False),
    limit: int = Query(100, ge=1, le=500),
) -> ApiResponse:
    wars = await service.list_wars(db, status, active_only, limit)
    return success_response(wars, request)


@router.post("", status_code=201)
async def submit_war(
    body: CreateWarRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[WarApplicationService, Depends(get_war_service)],
) -> ApiResponse:
    return success_response(await service.submit_war(db, body), request)


@router.get("/creator/{wallet}")
async def list_by_creator(
    wallet: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[WarApplicationService, Depends(get_war_service)],
    status: WarStatus | None = Query(None),
) -> ApiResponse:
    return success_response(await service.list_by_creator(db, wallet, status), request)


@router.get("/{war_id}")
async def get_war(
    war_id: int,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[WarApplicationService, Depends(get_war_service)],
) -> ApiResponse:
    return success_response(await service.get_war(db, war_id), request)


@router.get("/{war_id}/stats")
async def get_stats(
    war_id: int,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[WarApplicationService, Depends(get_war_service)],
) -> ApiResponse:
    return success_response(await service.get_stats(db, war_id), request)
