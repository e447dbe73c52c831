"""Shared test fixtures.

Environment is set before anything under src/ or config/ is imported:
config.settings builds its Settings instance at import time.
"""

import os

import bcrypt

ADMIN_PASSWORD = "correct-horse-battery"

os.environ.setdefault("JWT_SECRET", "test-secret-key-not-for-production")
os.environ.setdefault("ADMIN_USERNAME", "admin")
os.environ.setdefault(
    "ADMIN_PASSWORD_HASH",
    bcrypt.hashpw(ADMIN_PASSWORD.encode(), bcrypt.gensalt(rounds=4)).decode(),
)
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from collections.abc import Callable  # noqa: E402
from datetime import UTC, datetime, timedelta  # noqa: E402
from decimal import Decimal  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from src.tw_bet.domain.models import Bet  # noqa: E402
from src.tw_war.domain.models import War  # noqa: E402

NOW = datetime(2026, 10, 1, 12, 0, tzinfo=UTC)

WALLET = "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"


def _make_war(**kwargs) -> War:
    defaults = dict(
        id=1, token_a_id=10, token_b_id=20,
        token_a_symbol="PEPE", token_b_symbol="BONK",
        status="ACTIVE",
        start_time=NOW - timedelta(hours=1), end_time=NOW + timedelta(hours=23),
        duration_hours=24, min_bet_amount=1, description=None, creator_wallet=None,
        total_bets_a=0, total_bets_b=0,
        is_settled=False, winner=None,
        token_a_start_price=Decimal("0.0001"), token_b_start_price=Decimal("0.00002"),
        token_a_end_price=None, token_b_end_price=None,
        platform_fee=None, distributable_pool=None, settled_at=None,
        moderated_by=None, moderated_at=None,
        created_at=NOW - timedelta(hours=2), updated_at=NOW - timedelta(hours=2),
    )
    defaults.update(kwargs)
    return War(**defaults)


def _make_bet(**kwargs) -> Bet:
    defaults = dict(
        id=100, user_id=5, war_id=1, wallet_address=WALLET,
        amount=200, token_choice="A", transaction_signature="sig-100",
        is_claimed=False, payout_amount=None, created_at=NOW,
    )
    defaults.update(kwargs)
    return Bet(**defaults)


@pytest.fixture
def make_war() -> Callable[..., War]:
    return _make_war


@pytest.fixture
def make_bet() -> Callable[..., Bet]:
    return _make_bet


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return lambda: NOW


@pytest.fixture
def db() -> MagicMock:
    """AsyncSession stand-in: execute/commit/rollback are awaitable."""
    session = MagicMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


@pytest.fixture
def app(db: MagicMock):
    """App built by the factory, with the DB session dependency overridden.

    ASGITransport does not run the lifespan, so no database or Redis is touched.
    """
    from src.main import create_app
    from src.tw_common.database import get_db_session

    application = create_app()

    async def _db_override():
        yield db

    application.dependency_overrides[get_db_session] = _db_override
    return application


@pytest.fixture
async def client(app) -> AsyncClient:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
