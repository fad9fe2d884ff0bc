"""create tokens table

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "tokens",
        sa.Column("mint", sa.String(44), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, server_default=""),
        sa.Column("symbol", sa.String(20), nullable=False, server_default=""),
        sa.Column("createdAt", sa.Integer(), nullable=False),
    )
    op.create_index("ix_tokens_createdAt", "tokens", ["createdAt"])


def downgrade() -> None:
    op.drop_index("ix_tokens_createdAt", table_name="tokens")
    op.drop_table("tokens")
