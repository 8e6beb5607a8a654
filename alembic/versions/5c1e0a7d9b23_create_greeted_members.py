"""Create greeted_members table

Revision ID: 5c1e0a7d9b23
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "5c1e0a7d9b23"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "greeted_members",
        sa.Column("member_id", sa.BigInteger(), autoincrement=False, primary_key=True),
        sa.Column(
            "greeted_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )


def downgrade() -> None:
    op.drop_table("greeted_members")
