"""tw_token REST endpoints (public, read-only).

GET /tokens                       — all tokens with latest price
GET /tokens/{symbol}              — one token
GET /tokens/{symbol}/history      — recorded price points, newest first

Price writes live under /admin/tokens (tw_admin).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.container import get_token_service
from src.tw_common.database import get_db_session
from src.tw_common.response import ApiResponse, success_response
from src.tw_token.application.service import TokenApplicationService

router = APIRouter(prefix="/tokens", tags=["tokens"])


@router.get("")
async def list_tokens(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[TokenApplicationService, Depends(get_token_service)],
) -> ApiResponse:
    return success_response(await service.list_tokens(db), request)


@router.get("/{symbol}")
async def get_token(
    symbol: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[TokenApplicationService, Depends(get_token_service)],
) -> ApiResponse:
    return success_response(await service.get_token(db, symbol), request)


@router.get("/{symbol}/history")
async def get_history(
    symbol: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[TokenApplicationService, Depends(get_token_service)],
    limit: int = Query(100, ge=1, le=1000),
) -> ApiResponse:
    return success_response(await service.get_history(db, symbol, limit), request)
