"""SettlementService — settles an ended war exactly once.

Flow (one transaction):
  1. SELECT ... FOR UPDATE the war row (serialises settlers and bet increments)
  2. status / settled / end_time checks
  3. read current token prices from the price source
  4. determine_winner + build_settlement (pure)
  5. compare-and-set UPDATE ... WHERE is_settled = FALSE RETURNING
"""

import logging
from collections.abc import Callable
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from src.tw_clearing.application.schemas import SettlementResponse
from src.tw_clearing.domain.outcome import determine_winner
from src.tw_clearing.domain.pool import build_settlement, effective_fee_bps
from src.tw_common.datetime_utils import utc_now
from src.tw_common.enums import TiePolicy, WarStatus
from src.tw_common.errors import (
    TokenNotFoundError,
    WarAlreadySettledError,
    WarNotActiveError,
    WarNotEndedError,
    WarNotFoundError,
)
from src.tw_common.lamports import validate_fee_bps
from src.tw_token.domain.repository import PriceSourceProtocol
from src.tw_war.domain.repository import WarRepositoryProtocol
from src.tw_war.domain.rules import has_ended

logger = logging.getLogger(__name__)


class SettlementService:
    def __init__(
        self,
        war_repo: WarRepositoryProtocol,
        price_source: PriceSourceProtocol,
        fee_rate_bps: int,
        tie_policy: TiePolicy = TiePolicy.REFUND,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        validate_fee_bps(fee_rate_bps)
        self._war_repo = war_repo
        self._price_source = price_source
        self._fee_rate_bps = fee_rate_bps
        self._tie_policy = tie_policy
        self._clock = clock

    @property
    def fee_rate_bps(self) -> int:
        return self._fee_rate_bps

    async def settle_war(self, db: AsyncSession, war_id: int) -> SettlementResponse:
        try:
            response = await self._settle(db, war_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "War %s settled: winner=%s pool=%d fee=%d distributable=%d",
            war_id,
            response.winner,
            response.total_pool,
            response.platform_fee,
            response.distributable_pool,
        )
        return response

    async def _settle(self, db: AsyncSession, war_id: int) -> SettlementResponse:
        war = await self._war_repo.get_war_for_update(db, war_id)
        if war is None:
            raise WarNotFoundError(str(war_id))
        if war.is_settled:
            raise WarAlreadySettledError(str(war_id))
        if war.status != WarStatus.ACTIVE:
            raise WarNotActiveError(str(war_id))

        now = self._clock()
        if not has_ended(war, now):
            raise WarNotEndedError(str(war_id))

        prices = await self._price_source.get_current_prices(
            db, [war.token_a_id, war.token_b_id]
        )
        if war.token_a_id not in prices:
            raise TokenNotFoundError(war.token_a_symbol)
        if war.token_b_id not in prices:
            raise TokenNotFoundError(war.token_b_symbol)
        end_a = prices[war.token_a_id]
        end_b = prices[war.token_b_id]

        determination = determine_winner(
            war.token_a_start_price, end_a, war.token_b_start_price, end_b
        )
        result = build_settlement(
            war.id,
            war.total_bets_a,
            war.total_bets_b,
            determination,
            self._fee_rate_bps,
            self._tie_policy,
        )

        won = await self._war_repo.mark_settled(
            db,
            war.id,
            result.winner.value,
            end_a,
            end_b,
            result.platform_fee,
            result.distributable_pool,
            now,
        )
        if not won:
            logger.warning("Settlement race lost for war %s", war_id)
            raise WarAlreadySettledError(str(war_id))

        return SettlementResponse.from_result(
            result,
            end_a,
            end_b,
            effective_fee_bps(result.winner, self._fee_rate_bps, self._tie_policy),
            now.isoformat(),
        )
