"""Admin REST API. Every route except /login requires an admin Bearer token.

POST /admin/login                   — credentials → JWT
POST /admin/wars                    — create an ACTIVE war directly
POST /admin/wars/{war_id}/settle    — settle an ended war
PUT  /admin/wars/{war_id}/moderate  — approve / reject a PENDING war
PUT  /admin/tokens/{symbol}/price   — price-feed push
GET  /admin/invariants              — pool audit across all wars
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.container import (
    get_admin_service,
    get_settlement_service,
    get_token_service,
    get_war_service,
)
from src.tw_admin.application.schemas import AdminLoginRequest
from src.tw_admin.application.service import AdminService
from src.tw_clearing.application.service import SettlementService
from src.tw_common.database import get_db_session
from src.tw_common.response import ApiResponse, success_response
from src.tw_gateway.auth.dependencies import require_admin
from src.tw_token.application.schemas import PriceUpdateRequest
from src.tw_token.application.service import TokenApplicationService
from src.tw_war.application.schemas import AdminCreateWarRequest, ModerateWarRequest
from src.tw_war.application.service import WarApplicationService

router = APIRouter(prefix="/admin", tags=["admin"])

AdminUser = Annotated[str, Depends(require_admin)]
DbSession = Annotated[AsyncSession, Depends(get_db_session)]


@router.post("/login")
async def login(
    body: AdminLoginRequest,
    request: Request,
    service: Annotated[AdminService, Depends(get_admin_service)],
) -> ApiResponse:
    return success_response(service.login(body.username, body.password), request)


@router.post("/wars", status_code=201)
async def create_war(
    body: AdminCreateWarRequest,
    request: Request,
    admin: AdminUser,
    db: DbSession,
    service: Annotated[WarApplicationService, Depends(get_war_service)],
) -> ApiResponse:
    return success_response(await service.create_active_war(db, body, admin), request)


@router.post("/wars/{war_id}/settle")
async def settle_war(
    war_id: int,
    request: Request,
    admin: AdminUser,
    db: DbSession,
    service: Annotated[SettlementService, Depends(get_settlement_service)],
) -> ApiResponse:
    return success_response(await service.settle_war(db, war_id), request)


@router.put("/wars/{war_id}/moderate")
async def moderate_war(
    war_id: int,
    body: ModerateWarRequest,
    request: Request,
    admin: AdminUser,
    db: DbSession,
    service: Annotated[WarApplicationService, Depends(get_war_service)],
) -> ApiResponse:
    war = await service.moderate(db, war_id, body.action, admin)
    return success_response(war, request)


@router.put("/tokens/{symbol}/price")
async def push_price(
    symbol: str,
    body: PriceUpdateRequest,
    request: Request,
    admin: AdminUser,
    db: DbSession,
    service: Annotated[TokenApplicationService, Depends(get_token_service)],
) -> ApiResponse:
    return success_response(await service.record_price(db, symbol, body), request)


@router.get("/invariants")
async def invariants(
    request: Request,
    admin: AdminUser,
    db: DbSession,
    service: Annotated[AdminService, Depends(get_admin_service)],
) -> ApiResponse:
    return success_response(await service.verify_invariants(db), request)
