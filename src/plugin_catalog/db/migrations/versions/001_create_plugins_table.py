"""Create plugins table

Revision ID: 001_plugins
Revises:
Create Date: 2026-10-17

Stores one live manifest per plugin uid, along with its description, type
and optional SVG logo.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_plugins"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "plugins",
        sa.Column("uid", sa.String(255), primary_key=True),
        sa.Column("version", sa.String(50), nullable=False, server_default=""),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("spec", sa.Text, nullable=False),
        sa.Column("logo", sa.Text, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_plugins_type", "plugins", ["type"])


def downgrade() -> None:
    op.drop_index("ix_plugins_type", table_name="plugins")
    op.drop_table("plugins")
