"""Initial schema — opportunities and opportunity_tags.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "opportunities",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("is_remote", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("deadline", sa.Date, nullable=True),
        sa.Column("contact_email", sa.String(255), nullable=True),
        sa.Column("organization", sa.String(255), nullable=True),
        sa.Column("image", sa.String(2000), nullable=True),
        sa.Column("excerpt", sa.String(500), nullable=True),
        sa.Column("requirements", sa.Text, nullable=True),
        sa.Column("created_by", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_opportunities_category", "opportunities", ["category"])
    op.create_index("ix_opportunities_created_at", "opportunities", ["created_at"])
    op.create_index("ix_opportunities_created_by", "opportunities", ["created_by"])

    op.create_table(
        "opportunity_tags",
        sa.Column(
            "opportunity_id", UUID(as_uuid=True),
            sa.ForeignKey("opportunities.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("tag", sa.String(100), primary_key=True),
    )
    op.create_index("ix_opportunity_tags_tag", "opportunity_tags", ["tag"])


def downgrade() -> None:
    op.drop_index("ix_opportunity_tags_tag", table_name="opportunity_tags")
    op.drop_table("opportunity_tags")
    op.drop_index("ix_opportunities_created_by", table_name="opportunities")
    op.drop_index("ix_opportunities_created_at", table_name="opportunities")
    op.drop_index("ix_opportunities_category", table_name="opportunities")
    op.drop_table("opportunities")
