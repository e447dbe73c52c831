"""Service wiring.

build_services() constructs every application service from Settings; the app
factory stores the result on app.state.services. The get_*_service
functions are the FastAPI dependencies routers use, so tests can swap any
service with app.dependency_overrides.
"""

from dataclasses import dataclass

from starlette.requests import Request

from config.settings import Settings
from src.tw_admin.application.service import AdminService
from src.tw_bet.application.service import BetApplicationService
from src.tw_clearing.application.service import SettlementService
from src.tw_gateway.auth.jwt_handler import JwtHandler
from src.tw_token.application.service import TokenApplicationService
from src.tw_token.infrastructure.persistence import TokenRepository
from src.tw_user.application.service import UserApplicationService
from src.tw_war.application.service import WarApplicationService
from src.tw_war.infrastructure.persistence import WarRepository


@dataclass
class Services:
    tokens: TokenApplicationService
    wars: WarApplicationService
    bets: BetApplicationService
    users: UserApplicationService
    settlement: SettlementService
    admin: AdminService
    jwt: JwtHandler


def build_services(cfg: Settings) -> Services:
    war_repo = WarRepository()
    token_repo = TokenRepository()
    fee = cfg.FEE_RATE_SETTLEMENT_BPS
    jwt_handler = JwtHandler(cfg.JWT_SECRET, cfg.JWT_ALGORITHM, cfg.JWT_EXPIRE_MINUTES)
    return Services(
        tokens=TokenApplicationService(token_repo),
        wars=WarApplicationService(
            fee, cfg.MIN_USER_WAR_BET_LAMPORTS, war_repo=war_repo, token_repo=token_repo
        ),
        bets=BetApplicationService(fee, war_repo=war_repo),
        users=UserApplicationService(),
        settlement=SettlementService(war_repo, token_repo, fee, cfg.TIE_POLICY),
        admin=AdminService(
            cfg.ADMIN_USERNAME,
            cfg.ADMIN_PASSWORD_HASH,
            jwt_handler,
            war_repo=war_repo,
        ),
        jwt=jwt_handler,
    )


def _services(request: Request) -> Services:
    services: Services = request.app.state.services
    return services


def get_token_service(request: Request) -> TokenApplicationService:
    return _services(request).tokens


def get_war_service(request: Request) -> WarApplicationService:
    return _services(request).wars


def get_bet_service(request: Request) -> BetApplicationService:
    return _services(request).bets


def get_user_service(request: Request) -> UserApplicationService:
    return _services(request).users


def get_settlement_service(request: Request) -> SettlementService:
    return _services(request).settlement


def get_admin_service(request: Request) -> AdminService:
    return _services(request).admin
