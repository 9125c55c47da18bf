"""Opportunity ORM — persists postable listings and their owner.

Invariants:
    - id is UUID primary key (client-side default uuid4)
    - created_by is written once at creation; no code path assigns it afterwards
    - category holds an OpportunityCategory value
    - tags are a set: one OpportunityTag row per (opportunity_id, tag)

Design Decisions:
    - Tags in a child table over a JSON/ARRAY column: "shares any tag" is a portable
      IN-subquery on every backend (PostgreSQL and SQLite alike)
    - replace_tags reuses surviving rows so the composite primary key never collides on flush
    - timestamps set in Python (not server_default): values are on the instance after commit
      without a refresh round-trip
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import String, Text, Boolean, Date, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base
from app.models.opportunity_tag import OpportunityTag


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Opportunity(Base):
    """Opportunity entity: an internship, scholarship, competition, gig, pitch or other."""
    __tablename__ = "opportunities"
    __table_args__ = (
        Index("ix_opportunities_category", "category"),
        Index("ix_opportunities_created_at", "created_at"),
        Index("ix_opportunities_created_by", "created_by"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(20), nullable=False)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_remote: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    deadline: Mapped[date | None] = mapped_column(Date, nullable=True)
    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    organization: Mapped[str | None] = mapped_column(String(255), nullable=True)
    image: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    excerpt: Mapped[str | None] = mapped_column(String(500), nullable=True)
    requirements: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow,
    )

    # Relationships
    tag_links: Mapped[list["OpportunityTag"]] = relationship(
        "OpportunityTag", back_populates="opportunity",
        cascade="all, delete-orphan", lazy="selectin",
    )

    @property
    def tags(self) -> list[str]:
        """Tag names, sorted (a set has no meaningful order)."""
        return sorted(link.tag for link in self.tag_links)

    def replace_tags(self, tags: list[str]) -> None:
        wanted = list(dict.fromkeys(tags))
        kept = [link for link in self.tag_links if link.tag in wanted]
        existing = {link.tag for link in kept}
        kept.extend(OpportunityTag(tag=t) for t in wanted if t not in existing)
        self.tag_links = kept
