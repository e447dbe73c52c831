"""002: create users table

Revision ID: 002
Revises: 001
Create Date: 2026-10-05
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE users (
            id              BIGSERIAL       PRIMARY KEY,
            wallet_address  VARCHAR(44)     NOT NULL,
            username        VARCHAR(50),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_users_wallet      UNIQUE (wallet_address),
            CONSTRAINT uq_users_username    UNIQUE (username),
            CONSTRAINT ck_users_username_len CHECK (username IS NULL OR LENGTH(username) BETWEEN 1 AND 50)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_users_updated_at
            BEFORE UPDATE ON users
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)
    op.execute("COMMENT ON TABLE users IS 'Bettors, identified by Solana wallet; created on first bet';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS users CASCADE;")
