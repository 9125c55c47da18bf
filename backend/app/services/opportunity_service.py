"""Opportunity Service — create, read, update and delete opportunities against the record store.

Invariants:
    - Reads never require a credential; create/update/delete always do
    - Create authenticates before touching the store; created_by = identity.id
    - Update/delete order: locked load → NotFound → authenticate → ownership → write, one transaction
    - created_by is never part of an update
    - A row that vanished under a write surfaces as ResourceNotFoundError: StaleDataError on
      update, zero affected rows on delete

Design Decisions:
    - Delete issues explicit DELETE statements and checks rowcount: the ORM unit of work only
      warns when a deleted row is already gone
    - SELECT ... FOR UPDATE keeps the ownership check and the write atomic on PostgreSQL;
      SQLite ignores the clause and serializes writers itself
    - Existence is checked before the credential: a missing id is 404 for every caller
      (documented trade-off: it reveals which ids exist)
    - Page and count are two statements on one session; the count shares the page predicate
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.core.domain_types import OpportunityId
from app.core.errors import ErrorContext, ResourceNotFoundError
from app.core.identity import Identity
from app.core.query_resolver import OpportunityQuery
from app.models.opportunity import Opportunity
from app.models.opportunity_tag import OpportunityTag
from app.schemas.opportunity import OpportunityCreate, OpportunityUpdate
from app.services.authorization_gate import AuthorizationGate
from app.services.opportunity_filters import (
    build_count_statement, build_page_statement,
)

logger = logging.getLogger(__name__)

RESOURCE_NAME = "Opportunity"


class OpportunityService:
    """Record-store operations for one request (bound to that request's session)."""

    def __init__(self, db: AsyncSession, gate: AuthorizationGate):
        self._db = db
        self._gate = gate

    async def list_page(self, query: OpportunityQuery) -> tuple[list[Opportunity], int]:
        """One page of matches plus the total match count."""
        result = await self._db.execute(build_page_statement(query))
        records = list(result.scalars().all())
        total = (await self._db.execute(build_count_statement(query))).scalar_one()
        return records, total

    async def get(self, opportunity_id: OpportunityId) -> Opportunity:
        record = await self._db.get(Opportunity, opportunity_id)
        if record is None:
            raise _not_found(opportunity_id)
        return record

    async def create(
        self, payload: OpportunityCreate, identity: Identity,
    ) -> Opportunity:
        data = payload.model_dump(exclude={"tags", "category"})
        record = Opportunity(
            **data,
            category=payload.category.value,
            created_by=identity.id,
        )
        record.replace_tags(payload.tags)
        self._db.add(record)
        await self._db.commit()
        logger.info(
            "Opportunity created",
            extra={"opportunity_id": str(record.id), "user_id": identity.id},
        )
        return record

    async def update(
        self,
        opportunity_id: OpportunityId,
        payload: OpportunityUpdate,
        authorization: str | None,
    ) -> Opportunity:
        record = await self._load_for_mutation(opportunity_id)
        identity = self._gate.authenticate(authorization)
        self._gate.authorize_owner(
            record.created_by, identity, "update", str(opportunity_id),
        )

        changes = payload.changes()
        tags = changes.pop("tags", None)
        if "category" in changes:
            changes["category"] = changes["category"].value
        for name, value in changes.items():
            setattr(record, name, value)
        if tags is not None:
            record.replace_tags(tags)
        record.updated_at = datetime.now(timezone.utc)

        await self._commit_mutation(opportunity_id)
        logger.info(
            "Opportunity updated",
            extra={"opportunity_id": str(opportunity_id), "user_id": identity.id},
        )
        return record

    async def delete(
        self, opportunity_id: OpportunityId, authorization: str | None,
    ) -> None:
        record = await self._load_for_mutation(opportunity_id)
        identity = self._gate.authenticate(authorization)
        self._gate.authorize_owner(
            record.created_by, identity, "delete", str(opportunity_id),
        )
        await self._db.execute(
            delete(OpportunityTag).where(OpportunityTag.opportunity_id == opportunity_id),
        )
        result = await self._db.execute(
            delete(Opportunity).where(Opportunity.id == opportunity_id),
        )
        if result.rowcount == 0:
            await self._db.rollback()
            raise _not_found(opportunity_id)
        await self._db.commit()
        logger.info(
            "Opportunity deleted",
            extra={"opportunity_id": str(opportunity_id), "user_id": identity.id},
        )

    async def _load_for_mutation(self, opportunity_id: OpportunityId) -> Opportunity:
        result = await self._db.execute(
            select(Opportunity)
            .where(Opportunity.id == opportunity_id)
            .with_for_update(),
        )
        record = result.scalar_one_or_none()
        if record is None:
            await self._db.rollback()
            raise _not_found(opportunity_id)
        return record

    async def _commit_mutation(self, opportunity_id: OpportunityId) -> None:
        try:
            await self._db.commit()
        except StaleDataError:
            await self._db.rollback()
            raise _not_found(opportunity_id)


def _not_found(opportunity_id: UUID) -> ResourceNotFoundError:
    return ResourceNotFoundError(
        RESOURCE_NAME, str(opportunity_id),
        ErrorContext(opportunity_id=str(opportunity_id)),
    )
