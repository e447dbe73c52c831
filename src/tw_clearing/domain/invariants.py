"""Pool invariant checks, run against the audit rows of every war.

INV-POOL:   stored side total == sum of that side's bets
INV-SETTLE: settled war's platform_fee + distributable_pool == total pool
"""

import logging

from src.tw_war.domain.models import PoolAudit

logger = logging.getLogger(__name__)


def check_pool_audit(audit: PoolAudit) -> list[str]:
    violations: list[str] = []
    if audit.total_bets_a != audit.bets_sum_a:
        violations.append(
            f"INV-POOL violated: war={audit.war_id} total_bets_a={audit.total_bets_a} "
            f"!= sum(bets A)={audit.bets_sum_a}"
        )
    if audit.total_bets_b != audit.bets_sum_b:
        violations.append(
            f"INV-POOL violated: war={audit.war_id} total_bets_b={audit.total_bets_b} "
            f"!= sum(bets B)={audit.bets_sum_b}"
        )
    if audit.is_settled:
        pool = audit.total_bets_a + audit.total_bets_b
        fee = audit.platform_fee or 0
        dist = audit.distributable_pool or 0
        if fee + dist != pool:
            violations.append(
                f"INV-SETTLE violated: war={audit.war_id} fee({fee}) + "
                f"distributable({dist}) != pool({pool})"
            )
    for msg in violations:
        logger.error(msg)
    return violations


def verify_pool_audits(audits: list[PoolAudit]) -> list[str]:
    violations: list[str] = []
    for audit in audits:
        violations.extend(check_pool_audit(audit))
    return violations
