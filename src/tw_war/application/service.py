"""WarApplicationService — war registry: listing, creation, moderation, stats."""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from src.tw_clearing.domain.pool import apply_fee
from src.tw_common.datetime_utils import utc_now
from src.tw_common.enums import ModerationAction, Side, WarStatus
from src.tw_common.errors import (
    BetBelowMinimumError,
    InvalidStartPriceError,
    InvalidTokenPairError,
    TokenNotFoundError,
    WarNotFoundError,
    WarNotModeratableError,
)
from src.tw_token.domain.models import Token
from src.tw_token.domain.repository import TokenRepositoryProtocol
from src.tw_token.infrastructure.persistence import TokenRepository
from src.tw_war.application.schemas import (
    AdminCreateWarRequest,
    CreateWarRequest,
    WarOut,
    WarStatsOut,
)
from src.tw_war.domain.models import War
from src.tw_war.domain.repository import WarRepositoryProtocol
from src.tw_war.infrastructure.persistence import WarRepository

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 100


def _start_price(token: Token, side: Side) -> Decimal:
    if token.price is None or token.price <= 0:
        raise InvalidStartPriceError(side.value, token.price)
    return token.price


class WarApplicationService:
    def __init__(
        self,
        fee_rate_bps: int,
        min_user_war_bet: int,
        war_repo: WarRepositoryProtocol | None = None,
        token_repo: TokenRepositoryProtocol | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._fee_rate_bps = fee_rate_bps
        self._min_user_war_bet = min_user_war_bet
        self._war_repo: WarRepositoryProtocol = war_repo or WarRepository()
        self._token_repo: TokenRepositoryProtocol = token_repo or TokenRepository()
        self._clock = clock

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_wars(
        self,
        db: AsyncSession,
        status: WarStatus | None,
        active_only: bool,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> list[WarOut]:
        now = self._clock()
        wars = await self._war_repo.list_wars(
            db,
            status.value if status else None,
            now if active_only else None,
            limit,
        )
        return [WarOut.from_domain(w, now) for w in wars]

    async def get_war(self, db: AsyncSession, war_id: int) -> WarOut:
        return WarOut.from_domain(await self._load(db, war_id), self._clock())

    async def list_by_creator(
        self, db: AsyncSession, wallet: str, status: WarStatus | None
    ) -> list[WarOut]:
        now = self._clock()
        wars = await self._war_repo.list_by_creator(
            db, wallet, status.value if status else None
        )
        return [WarOut.from_domain(w, now) for w in wars]

    async def get_stats(self, db: AsyncSession, war_id: int) -> WarStatsOut:
        stats = await self._war_repo.get_stats(db, war_id)
        if stats is None:
            raise WarNotFoundError(str(war_id))
        split = apply_fee(stats.total_bets_a + stats.total_bets_b, self._fee_rate_bps)

        def odds(side_total: int) -> Decimal | None:
            if side_total == 0:
                return None
            return Decimal(split.distributable_pool) / Decimal(side_total)

        return WarStatsOut.from_domain(
            stats, odds(stats.total_bets_a), odds(stats.total_bets_b)
        )

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    async def submit_war(self, db: AsyncSession, req: CreateWarRequest) -> WarOut:
        """User-submitted war: stored PENDING, no times or prices yet."""
        if req.min_bet_amount < self._min_user_war_bet:
            raise BetBelowMinimumError(req.min_bet_amount, self._min_user_war_bet)
        try:
            token_a, token_b = await self._resolve_pair(
                db, req.token_a_symbol, req.token_b_symbol
            )
            war_id = await self._war_repo.create_war(
                db,
                token_a.id,
                token_b.id,
                WarStatus.PENDING.value,
                req.duration_hours,
                req.min_bet_amount,
                req.description,
                req.creator_wallet,
                None,
                None,
                None,
                None,
            )
            war = await self._load(db, war_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "War %s submitted by %s: %s vs %s (%dh)",
            war_id, req.creator_wallet, token_a.symbol, token_b.symbol, req.duration_hours,
        )
        return WarOut.from_domain(war, self._clock())

    async def create_active_war(
        self, db: AsyncSession, req: AdminCreateWarRequest, admin: str
    ) -> WarOut:
        now = self._clock()
        try:
            token_a, token_b = await self._resolve_pair(
                db, req.token_a_symbol, req.token_b_symbol
            )
            war_id = await self._war_repo.create_war(
                db,
                token_a.id,
                token_b.id,
                WarStatus.ACTIVE.value,
                req.duration_hours,
                req.min_bet_amount,
                req.description,
                None,
                now,
                now + timedelta(hours=req.duration_hours),
                _start_price(token_a, Side.A),
                _start_price(token_b, Side.B),
            )
            war = await self._load(db, war_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "War %s created by admin %s: %s vs %s until %s",
            war_id, admin, token_a.symbol, token_b.symbol, war.end_time,
        )
        return WarOut.from_domain(war, now)

    # ------------------------------------------------------------------
    # Moderation
    # ------------------------------------------------------------------

    async def moderate(
        self, db: AsyncSession, war_id: int, action: ModerationAction, admin: str
    ) -> WarOut:
        """Approve (PENDING -> ACTIVE, clock starts now) or reject a war."""
        now = self._clock()
        try:
            war = await self._war_repo.get_war_for_update(db, war_id)
            if war is None:
                raise WarNotFoundError(str(war_id))
            if war.status != WarStatus.PENDING:
                raise WarNotModeratableError(str(war_id), war.status)

            price_a = price_b = None
            new_status = WarStatus.REJECTED
            if action == ModerationAction.APPROVE:
                new_status = WarStatus.ACTIVE
                token_a = await self._token_repo.get_by_id(db, war.token_a_id)
                token_b = await self._token_repo.get_by_id(db, war.token_b_id)
                if token_a is None:
                    raise TokenNotFoundError(war.token_a_symbol)
                if token_b is None:
                    raise TokenNotFoundError(war.token_b_symbol)
                price_a = _start_price(token_a, Side.A)
                price_b = _start_price(token_b, Side.B)

            if not await self._war_repo.moderate(
                db, war_id, new_status.value, admin, now, price_a, price_b
            ):
                raise WarNotModeratableError(str(war_id), war.status)
            war = await self._load(db, war_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("War %s moderated by %s: %s", war_id, admin, new_status.value)
        return WarOut.from_domain(war, now)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _load(self, db: AsyncSession, war_id: int) -> War:
        war = await self._war_repo.get_war(db, war_id)
        if war is None:
            raise WarNotFoundError(str(war_id))
        return war

    async def _resolve_pair(
        self, db: AsyncSession, symbol_a: str, symbol_b: str
    ) -> tuple[Token, Token]:
        if symbol_a == symbol_b:
            raise InvalidTokenPairError("a war needs two different tokens")
        token_a = await self._token_repo.get_by_symbol(db, symbol_a)
        if token_a is None:
            raise TokenNotFoundError(symbol_a)
        token_b = await self._token_repo.get_by_symbol(db, symbol_b)
        if token_b is None:
            raise TokenNotFoundError(symbol_b)
        return token_a, token_b
