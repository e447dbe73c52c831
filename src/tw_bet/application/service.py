"""BetApplicationService — bet placement, preview and claim.

place_bet runs in one transaction:
  1. read war, check Active + min bet
  2. get-or-create the user by wallet
  3. INSERT bet ON CONFLICT (transaction_signature) DO NOTHING RETURNING
  4. UPDATE wars SET total_bets_x = total_bets_x + :amount WHERE <active>
Any failure rolls back all four steps together.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from src.tw_bet.application.schemas import (
    BetOut,
    ClaimResponse,
    PlaceBetRequest,
    PreviewResponse,
)
from src.tw_bet.domain.repository import BetRepositoryProtocol
from src.tw_bet.infrastructure.persistence import BetRepository
from src.tw_clearing.domain.payout import (
    compute_payout,
    preview_winnings,
    settlement_from_war,
)
from src.tw_common.datetime_utils import utc_now
from src.tw_common.enums import Side
from src.tw_common.errors import (
    BetAlreadyClaimedError,
    BetBelowMinimumError,
    BetNotFoundError,
    BetOwnershipError,
    DuplicateBetError,
    WarNotActiveError,
    WarNotFoundError,
    WarNotSettledError,
)
from src.tw_common.lamports import lamports_to_display
from src.tw_user.domain.repository import UserRepositoryProtocol
from src.tw_user.infrastructure.persistence import UserRepository
from src.tw_war.domain.repository import WarRepositoryProtocol
from src.tw_war.domain.rules import is_accepting_bets
from src.tw_war.infrastructure.persistence import WarRepository

logger = logging.getLogger(__name__)

WAR_BETS_LIMIT = 100


class BetApplicationService:
    def __init__(
        self,
        fee_rate_bps: int,
        bet_repo: BetRepositoryProtocol | None = None,
        war_repo: WarRepositoryProtocol | None = None,
        user_repo: UserRepositoryProtocol | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._fee_rate_bps = fee_rate_bps
        self._bet_repo: BetRepositoryProtocol = bet_repo or BetRepository()
        self._war_repo: WarRepositoryProtocol = war_repo or WarRepository()
        self._user_repo: UserRepositoryProtocol = user_repo or UserRepository()
        self._clock = clock

    # ------------------------------------------------------------------
    # Accrual
    # ------------------------------------------------------------------

    async def place_bet(self, db: AsyncSession, req: PlaceBetRequest) -> BetOut:
        try:
            bet_id = await self._place(db, req)
            bet = await self._bet_repo.get_bet(db, bet_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        if bet is None:
            raise BetNotFoundError(str(bet_id))
        logger.info(
            "Bet %s placed: war=%s wallet=%s side=%s amount=%d",
            bet_id, req.war_id, req.user_wallet, req.token_choice, req.amount,
        )
        return BetOut.from_domain(bet)

    async def _place(self, db: AsyncSession, req: PlaceBetRequest) -> int:
        war = await self._war_repo.get_war(db, req.war_id)
        if war is None:
            raise WarNotFoundError(str(req.war_id))
        now = self._clock()
        if not is_accepting_bets(war, now):
            raise WarNotActiveError(str(req.war_id))
        if req.amount < war.min_bet_amount:
            raise BetBelowMinimumError(req.amount, war.min_bet_amount)

        user_id = await self._user_repo.get_or_create(db, req.user_wallet)
        bet_id = await self._bet_repo.insert_bet(
            db,
            user_id,
            req.war_id,
            req.amount,
            req.token_choice,
            req.transaction_signature,
        )
        if bet_id is None:
            logger.warning(
                "Duplicate transaction signature rejected: %s", req.transaction_signature
            )
            raise DuplicateBetError(req.transaction_signature)

        # The war can close between the read above and this statement.
        if not await self._war_repo.increment_pool(
            db, req.war_id, req.token_choice, req.amount, now
        ):
            raise WarNotActiveError(str(req.war_id))
        return bet_id

    # ------------------------------------------------------------------
    # Preview
    # ------------------------------------------------------------------

    async def preview(
        self, db: AsyncSession, war_id: int, choice: Side, amount: int
    ) -> PreviewResponse:
        war = await self._war_repo.get_war(db, war_id)
        if war is None:
            raise WarNotFoundError(str(war_id))
        p = preview_winnings(war, choice, amount, self._fee_rate_bps)
        return PreviewResponse.from_domain(war_id, choice.value, amount, p)

    # ------------------------------------------------------------------
    # Claim
    # ------------------------------------------------------------------

    async def claim(self, db: AsyncSession, bet_id: int, wallet: str) -> ClaimResponse:
        try:
            bet = await self._bet_repo.get_bet(db, bet_id)
            if bet is None:
                raise BetNotFoundError(str(bet_id))
            if bet.wallet_address != wallet:
                raise BetOwnershipError(str(bet_id))
            if bet.is_claimed:
                raise BetAlreadyClaimedError(str(bet_id))
            war = await self._war_repo.get_war(db, bet.war_id)
            if war is None:
                raise WarNotFoundError(str(bet.war_id))
            if not war.is_settled:
                raise WarNotSettledError(str(war.id))

            settlement = settlement_from_war(war)
            payout = compute_payout(bet, war, settlement)
            if not await self._bet_repo.mark_claimed(db, bet_id, payout):
                raise BetAlreadyClaimedError(str(bet_id))
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Bet %s claimed by %s: payout=%d", bet_id, wallet, payout)
        return ClaimResponse(
            bet_id=bet_id,
            war_id=war.id,
            winner=settlement.winner.value,
            payout_amount=payout,
            payout_display=lamports_to_display(payout),
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_user_bets(
        self, db: AsyncSession, wallet: str, limit: int
    ) -> list[BetOut]:
        return [BetOut.from_domain(b) for b in await self._bet_repo.list_by_wallet(db, wallet, limit)]

    async def list_war_bets(self, db: AsyncSession, war_id: int) -> list[BetOut]:
        bets = await self._bet_repo.list_by_war(db, war_id, WAR_BETS_LIMIT)
        return [BetOut.from_domain(b) for b in bets]
