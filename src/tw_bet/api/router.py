"""tw_bet REST endpoints.

POST /bets                        — place a bet (rate limited per IP)
GET  /bets/user/{wallet}          — a wallet's bets, newest first
GET  /bets/war/{war_id}           — latest 100 bets of a war
GET  /bets/preview/{war_id}       — projected winnings for a hypothetical bet
POST /bets/{bet_id}/claim         — claim a settled bet's payout
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.container import get_bet_service
from src.tw_bet.application.schemas import ClaimRequest, PlaceBetRequest
from src.tw_bet.application.service import BetApplicationService
from src.tw_common.database import get_db_session
from src.tw_common.enums import Side
from src.tw_common.response import ApiResponse, success_response

router = APIRouter(prefix="/bets", tags=["bets"])


@router.post("", status_code=201)
async def place_bet(
    body: PlaceBetRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[BetApplicationService, Depends(get_bet_service)],
) -> ApiResponse:
    return success_response(await service.place_bet(db, body), request)


@router.get("/user/{wallet}")
async def list_user_bets(
    wallet: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[BetApplicationService, Depends(get_bet_service)],
    limit: int = Query(100, ge=1, le=500),
) -> ApiResponse:
    return success_response(await service.list_user_bets(db, wallet, limit), request)


@router.get("/war/{war_id}")
async def list_war_bets(
    war_id: int,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[BetApplicationService, Depends(get_bet_service)],
) -> ApiResponse:
    return success_response(await service.list_war_bets(db, war_id), request)


@router.get("/preview/{war_id}")
async def preview(
    war_id: int,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[BetApplicationService, Depends(get_bet_service)],
    choice: Side = Query(...),
    amount: int = Query(..., gt=0),
) -> ApiResponse:
    return success_response(await service.preview(db, war_id, choice, amount), request)


@router.post("/{bet_id}/claim")
async def claim(
    bet_id: int,
    body: ClaimRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[BetApplicationService, Depends(get_bet_service)],
) -> ApiResponse:
    return success_response(await service.claim(db, bet_id, body.user_wallet), request)
