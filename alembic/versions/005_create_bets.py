"""005: create bets table

Revision ID: 005
Revises: 004
Create Date: 2026-10-05
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE bets (
            id                      BIGSERIAL       PRIMARY KEY,
            user_id                 BIGINT          NOT NULL REFERENCES users (id),
            war_id                  BIGINT          NOT NULL REFERENCES wars (id),
            amount                  BIGINT          NOT NULL,
            token_choice            CHAR(1)         NOT NULL,
            transaction_signature   VARCHAR(128)    NOT NULL,
            is_claimed              BOOLEAN         NOT NULL DEFAULT FALSE,
            payout_amount           BIGINT,
            created_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_bets_tx_signature UNIQUE (transaction_signature),
            CONSTRAINT ck_bets_amount       CHECK (amount > 0),
            CONSTRAINT ck_bets_choice       CHECK (token_choice IN ('A', 'B')),
            CONSTRAINT ck_bets_payout       CHECK (
                (is_claimed = FALSE AND payout_amount IS NULL)
                OR (is_claimed = TRUE AND payout_amount >= 0)
            )
        );
    """)
    op.execute("CREATE INDEX idx_bets_war_created ON bets (war_id, created_at DESC);")
    op.execute("CREATE INDEX idx_bets_user_created ON bets (user_id, created_at DESC);")
    op.execute("COMMENT ON TABLE bets IS 'Stakes; transaction_signature is the idempotency key';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS bets CASCADE;")
