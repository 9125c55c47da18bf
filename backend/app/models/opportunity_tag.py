"""OpportunityTag ORM — one free-form tag attached to an opportunity.

Invariants:
    - Composite primary key (opportunity_id, tag): a tag appears at most once per opportunity
    - Deleted with its opportunity (ORM cascade + ON DELETE CASCADE)
"""

import uuid

from sqlalchemy import String, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


class OpportunityTag(Base):
    __tablename__ = "opportunity_tags"
    __table_args__ = (
        Index("ix_opportunity_tags_tag", "tag"),
    )

    opportunity_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("opportunities.id", ondelete="CASCADE"),
        primary_key=True,
    )
    tag: Mapped[str] = mapped_column(String(100), primary_key=True)

    opportunity: Mapped["Opportunity"] = relationship(
        "Opportunity", back_populates="tag_links",
    )
