"""004: create wars table

Revision ID: 004
Revises: 003
Create Date: 2026-10-05
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE wars (
            id                      BIGSERIAL       PRIMARY KEY,
            token_a_id              BIGINT          NOT NULL REFERENCES tokens (id),
            token_b_id              BIGINT          NOT NULL REFERENCES tokens (id),
            status                  VARCHAR(10)     NOT NULL DEFAULT 'PENDING',
            start_time              TIMESTAMPTZ,
            end_time                TIMESTAMPTZ,
            duration_hours          INT             NOT NULL DEFAULT 24,
            min_bet_amount          BIGINT          NOT NULL DEFAULT 1,
            description             TEXT,
            creator_wallet          VARCHAR(44),

            -- Pool (lamports), only ever incremented until settled
            total_bets_a            BIGINT          NOT NULL DEFAULT 0,
            total_bets_b            BIGINT          NOT NULL DEFAULT 0,

            -- Price snapshots
            token_a_start_price     NUMERIC(30, 12),
            token_b_start_price     NUMERIC(30, 12),
            token_a_end_price       NUMERIC(30, 12),
            token_b_end_price       NUMERIC(30, 12),

            -- Settlement (frozen once is_settled)
            is_settled              BOOLEAN         NOT NULL DEFAULT FALSE,
            winner                  VARCHAR(3),
            platform_fee            BIGINT,
            distributable_pool      BIGINT,
            settled_at              TIMESTAMPTZ,

            -- Moderation
            moderated_by            VARCHAR(64),
            moderated_at            TIMESTAMPTZ,

            created_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),

            CONSTRAINT ck_wars_status       CHECK (status IN ('PENDING', 'ACTIVE', 'REJECTED')),
            CONSTRAINT ck_wars_winner       CHECK (winner IS NULL OR winner IN ('A', 'B', 'TIE')),
            CONSTRAINT ck_wars_distinct     CHECK (token_a_id <> token_b_id),
            CONSTRAINT ck_wars_totals       CHECK (total_bets_a >= 0 AND total_bets_b >= 0),
            CONSTRAINT ck_wars_duration     CHECK (duration_hours BETWEEN 1 AND 168),
            CONSTRAINT ck_wars_min_bet      CHECK (min_bet_amount > 0),
            CONSTRAINT ck_wars_window       CHECK (end_time IS NULL OR start_time < end_time),
            CONSTRAINT ck_wars_active_times CHECK (
                status <> 'ACTIVE'
                OR (start_time IS NOT NULL AND end_time IS NOT NULL
                    AND token_a_start_price IS NOT NULL AND token_b_start_price IS NOT NULL)
            ),
            CONSTRAINT ck_wars_settled      CHECK (
                is_settled = FALSE
                OR (winner IS NOT NULL
                    AND platform_fee + distributable_pool = total_bets_a + total_bets_b)
            )
        );
    """)
    op.execute("CREATE INDEX idx_wars_status_end ON wars (status, end_time);")
    op.execute("CREATE INDEX idx_wars_creator ON wars (creator_wallet) WHERE creator_wallet IS NOT NULL;")
    op.execute("""
        CREATE TRIGGER trg_wars_updated_at
            BEFORE UPDATE ON wars
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)
    op.execute("COMMENT ON TABLE wars IS 'Token-vs-token price wars and their pari-mutuel pools';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS wars CASCADE;")
