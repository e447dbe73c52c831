"""Admin application service — login and the pool invariant audit.

War creation, moderation, settlement and price pushes are delegated by the
router to the owning module's service; this class only holds what belongs
to no other module.
"""

import hmac
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.tw_admin.application.schemas import AdminLoginResponse, InvariantReport
from src.tw_clearing.domain.invariants import verify_pool_audits
from src.tw_common.errors import InvalidCredentialsError
from src.tw_gateway.auth.jwt_handler import JwtHandler
from src.tw_gateway.auth.password import verify_password
from src.tw_war.domain.repository import WarRepositoryProtocol
from src.tw_war.infrastructure.persistence import WarRepository

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(
        self,
        username: str,
        password_hash: str,
        jwt_handler: JwtHandler,
        war_repo: WarRepositoryProtocol | None = None,
    ) -> None:
        self._username = username
        self._password_hash = password_hash
        self._jwt = jwt_handler
        self._war_repo: WarRepositoryProtocol = war_repo or WarRepository()

    def login(self, username: str, password: str) -> AdminLoginResponse:
        """Exchange admin credentials for an access token.

        An empty ADMIN_PASSWORD_HASH disables login altogether.
        """
        name_ok = hmac.compare_digest(username.encode(), self._username.encode())
        password_ok = verify_password(password, self._password_hash)
        if not (name_ok and password_ok):
            logger.warning("Admin login failed for %r", username)
            raise InvalidCredentialsError()
        logger.info("Admin login: %s", username)
        return AdminLoginResponse(
            access_token=self._jwt.create_access_token(username),
            expires_in=self._jwt.expires_in_seconds,
        )

    async def verify_invariants(self, db: AsyncSession) -> InvariantReport:
        audits = await self._war_repo.list_pool_audits(db)
        violations = verify_pool_audits(audits)
        return InvariantReport(
            ok=not violations, wars_checked=len(audits), violations=violations
        )
