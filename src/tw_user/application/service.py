"""UserApplicationService — profiles, usernames and the leaderboard."""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.tw_common.datetime_utils import utc_now
from src.tw_common.enums import LeaderboardPeriod
from src.tw_common.errors import UsernameTakenError, UserNotFoundError
from src.tw_user.application.schemas import (
    LeaderboardEntry,
    UsernameUpdateRequest,
    UserOut,
    UserProfileResponse,
)
from src.tw_user.domain.repository import UserRepositoryProtocol
from src.tw_user.infrastructure.persistence import UserRepository

logger = logging.getLogger(__name__)

_PERIOD_DAYS = {LeaderboardPeriod.WEEK: 7, LeaderboardPeriod.MONTH: 30}


class UserApplicationService:
    def __init__(
        self,
        repo: UserRepositoryProtocol | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._repo: UserRepositoryProtocol = repo or UserRepository()
        self._clock = clock

    async def get_profile(self, db: AsyncSession, wallet: str) -> UserProfileResponse:
        user = await self._repo.get_by_wallet(db, wallet)
        if user is None:
            raise UserNotFoundError(wallet)
        record = await self._repo.get_record(db, wallet)
        if record is None:
            raise UserNotFoundError(wallet)
        return UserProfileResponse.from_domain(user, record)

    async def set_username(
        self, db: AsyncSession, wallet: str, req: UsernameUpdateRequest
    ) -> UserOut:
        try:
            owner = await self._repo.username_owner(db, req.username)
            if owner is not None and owner != wallet:
                raise UsernameTakenError(req.username)
            user = await self._repo.set_username(db, wallet, req.username)
            if user is None:
                raise UserNotFoundError(wallet)
            await db.commit()
        except IntegrityError:
            # lost a race for the same username against the UNIQUE constraint
            await db.rollback()
            raise UsernameTakenError(req.username) from None
        except Exception:
            await db.rollback()
            raise
        logger.info("Username set: %s -> %s", wallet, req.username)
        return UserOut.from_domain(user)

    async def leaderboard(
        self, db: AsyncSession, limit: int, period: LeaderboardPeriod
    ) -> list[LeaderboardEntry]:
        since = None
        if period in _PERIOD_DAYS:
            since = self._clock() - timedelta(days=_PERIOD_DAYS[period])
        records = await self._repo.leaderboard(db, since, limit)
        return [LeaderboardEntry.from_domain(i, r) for i, r in enumerate(records, start=1)]
