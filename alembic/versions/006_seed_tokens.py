"""006: seed token registry

Revision ID: 006
Revises: 005
Create Date: 2026-10-05
"""

from typing import Sequence, Union

from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Prices stay NULL until the price feed pushes the first value
    op.execute("""
        INSERT INTO tokens (symbol, name) VALUES
            ('DOGE', 'Dogecoin'),
            ('SHIB', 'Shiba Inu'),
            ('PEPE', 'Pepe'),
            ('WIF', 'dogwifhat'),
            ('BONK', 'Bonk'),
            ('POPCAT', 'Popcat')
        ON CONFLICT (symbol) DO NOTHING;
    """)


def downgrade() -> None:
    op.execute("""
        DELETE FROM tokens
        WHERE symbol IN ('DOGE', 'SHIB', 'PEPE', 'WIF', 'BONK', 'POPCAT')
          AND id NOT IN (SELECT token_a_id FROM wars UNION SELECT token_b_id FROM wars);
    """)
