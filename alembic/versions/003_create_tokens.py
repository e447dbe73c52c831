"""003: create tokens and price_history tables

Revision ID: 003
Revises: 002
Create Date: 2026-10-05
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # NUMERIC keeps sub-satoshi meme-coin prices exact
    op.execute("""
        CREATE TABLE tokens (
            id                  BIGSERIAL       PRIMARY KEY,
            symbol              VARCHAR(20)     NOT NULL,
            name                VARCHAR(100)    NOT NULL,
            contract_address    VARCHAR(44),
            price               NUMERIC(30, 12),
            market_cap          BIGINT,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_tokens_symbol         UNIQUE (symbol),
            CONSTRAINT ck_tokens_price_positive CHECK (price IS NULL OR price > 0),
            CONSTRAINT ck_tokens_market_cap     CHECK (market_cap IS NULL OR market_cap >= 0)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_tokens_updated_at
            BEFORE UPDATE ON tokens
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)
    op.execute("""
        CREATE TABLE price_history (
            id              BIGSERIAL       PRIMARY KEY,
            token_id        BIGINT          NOT NULL REFERENCES tokens (id),
            price           NUMERIC(30, 12) NOT NULL,
            market_cap      BIGINT,
            recorded_at     TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_price_history_price_positive CHECK (price > 0)
        );
    """)
    op.execute(
        "CREATE INDEX idx_price_history_token_time ON price_history (token_id, recorded_at DESC);"
    )
    op.execute("COMMENT ON TABLE tokens IS 'Token registry; price is the latest value pushed by the price feed';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS price_history CASCADE;")
    op.execute("DROP TABLE IF EXISTS tokens CASCADE;")
