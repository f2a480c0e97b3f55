"""create team invitations

Revision ID: c5d9a0e3b742
Revises: 8b4e2f6a1c37
Create Date: 2026-09-04
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "c5d9a0e3b742"
down_revision: Union[str, Sequence[str], None] = "8b4e2f6a1c37"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "team_invitations",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column(
            "inviter_id",
            sa.Integer,
            sa.ForeignKey("accounts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="member"),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
        sa.Column("accepted_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("inviter_id", "email", name="uq_team_invitations_inviter_email"),
    )
    op.create_index("ix_team_invitations_email_status", "team_invitations", ["email", "status"])


def downgrade() -> None:
    op.drop_index("ix_team_invitations_email_status", table_name="team_invitations")
    op.drop_table("team_invitations")
