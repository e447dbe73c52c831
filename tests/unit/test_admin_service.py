"""Unit tests for AdminService."""

from unittest.mock import AsyncMock, MagicMock

import bcrypt
import pytest

from src.tw_admin.application.service import AdminService
from src.tw_common.errors import InvalidCredentialsError
from src.tw_gateway.auth.jwt_handler import JwtHandler
from src.tw_war.domain.models import PoolAudit

_HASH = bcrypt.hashpw(b"hunter22", bcrypt.gensalt(rounds=4)).decode()
_JWT = JwtHandler("admin-test-secret", "HS256", 30)


def _svc(password_hash: str = _HASH, war_repo=None) -> AdminService:
    return AdminService("admin", password_hash, _JWT, war_repo=war_repo or MagicMock())


def test_login_issues_admin_token() -> None:
    resp = _svc().login("admin", "hunter22")
    assert resp.token_type == "bearer"
    assert resp.expires_in == 1800
    assert _JWT.decode_token(resp.access_token)["sub"] == "admin"


@pytest.mark.parametrize("username,password", [("admin", "wrong"), ("root", "hunter22")])
def test_login_bad_credentials(username: str, password: str) -> None:
    with pytest.raises(InvalidCredentialsError):
        _svc().login(username, password)


def test_login_disabled_without_hash() -> None:
    with pytest.raises(InvalidCredentialsError):
        _svc(password_hash="").login("admin", "")


@pytest.mark.asyncio
async def test_invariant_report(db) -> None:
    repo = MagicMock()
    repo.list_pool_audits = AsyncMock(
        return_value=[
            PoolAudit(war_id=1, total_bets_a=10, total_bets_b=0, bets_sum_a=10, bets_sum_b=0),
            PoolAudit(war_id=2, total_bets_a=10, total_bets_b=5, bets_sum_a=9, bets_sum_b=5),
        ]
    )
    report = await _svc(war_repo=repo).verify_invariants(db)
    assert report.ok is False
    assert report.wars_checked == 2
    assert len(report.violations) == 1
