"""Opportunity Routes — public reads, owner-only writes.

Invariants:
    - Static paths (/search, /category/...) registered before /{opportunity_id}
    - Every list endpoint returns {data, pagination}; query parsing is delegated to resolve_query
    - POST requires a verified identity before the body reaches the service
    - PUT and PATCH share one partial-update handler
    - A path id that is not a UUID is RESOURCE_NOT_FOUND, same as an unknown UUID

Design Decisions:
    - Raw query params collected as name -> list[str] so the resolver sees repeated keys
    - Category endpoints differ only by CategoryScope; they share _list_envelope
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Header, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.auth import get_authorization_gate, require_identity
from app.core.domain_types import CategoryScope, OpportunityId
from app.core.errors import ErrorContext, ResourceNotFoundError
from app.core.identity import Identity
from app.core.query_resolver import (
    OpportunityQuery, QueryParams, build_pagination, resolve_query,
)
from app.infrastructure.database import get_db
from app.schemas.opportunity import (
    MessageResponse,
    OpportunityCreate,
    OpportunityEnvelope,
    OpportunityListResponse,
    OpportunityResponse,
    OpportunitySearchResponse,
    OpportunityUpdate,
    OpportunityWriteResponse,
    PaginationMeta,
)
from app.services.authorization_gate import AuthorizationGate
from app.services.opportunity_service import RESOURCE_NAME, OpportunityService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/opportunities", tags=["opportunities"])


def get_opportunity_service(
    db: AsyncSession = Depends(get_db),
    gate: AuthorizationGate = Depends(get_authorization_gate),
) -> OpportunityService:
    return OpportunityService(db, gate)


def parse_opportunity_id(raw: str) -> OpportunityId:
    """Path id as a UUID; anything unparsable cannot name a record."""
    try:
        return OpportunityId(UUID(raw))
    except ValueError:
        raise ResourceNotFoundError(
            RESOURCE_NAME, raw, ErrorContext(opportunity_id=raw),
        )


def collect_query_params(request: Request) -> QueryParams:
    params = request.query_params
    return {key: params.getlist(key) for key in params.keys()}


async def _list_envelope(
    request: Request,
    service: OpportunityService,
    scope: CategoryScope,
    require_search: bool = False,
) -> tuple[OpportunityQuery, OpportunityListResponse]:
    query = resolve_query(
        collect_query_params(request), scope, require_search=require_search,
    )
    records, total = await service.list_page(query)
    logger.debug(
        "Listed opportunities",
        extra={"category_scope": scope.value, "total": total},
    )
    envelope = OpportunityListResponse(
        data=[OpportunityResponse.model_validate(r) for r in records],
        pagination=PaginationMeta.model_validate(build_pagination(query.page, total)),
    )
    return query, envelope


# ─── Reads ───────────────────────────────────────────────────────

@router.get("", response_model=OpportunityListResponse)
async def list_opportunities(
    request: Request, service: OpportunityService = Depends(get_opportunity_service),
):
    """List opportunities with filters, pagination and sort."""
    _, envelope = await _list_envelope(request, service, CategoryScope.ALL)
    return envelope


@router.get("/search", response_model=OpportunitySearchResponse)
async def search_opportunities(
    request: Request, service: OpportunityService = Depends(get_opportunity_service),
):
    """Free-text search; q is required."""
    query, envelope = await _list_envelope(
        request, service, CategoryScope.ALL, require_search=True,
    )
    return OpportunitySearchResponse(
        query=query.filter.search,
        data=envelope.data,
        pagination=envelope.pagination,
    )


@router.get("/category/internships", response_model=OpportunityListResponse)
async def list_internships(
    request: Request, service: OpportunityService = Depends(get_opportunity_service),
):
    _, envelope = await _list_envelope(request, service, CategoryScope.INTERNSHIPS)
    return envelope


@router.get("/category/scholarships", response_model=OpportunityListResponse)
async def list_scholarships(
    request: Request, service: OpportunityService = Depends(get_opportunity_service),
):
    _, envelope = await _list_envelope(request, service, CategoryScope.SCHOLARSHIPS)
    return envelope


@router.get("/category/others", response_model=OpportunityListResponse)
async def list_others(
    request: Request, service: OpportunityService = Depends(get_opportunity_service),
):
    """Everything that is neither an internship nor a scholarship."""
    _, envelope = await _list_envelope(request, service, CategoryScope.OTHERS)
    return envelope


@router.get("/{opportunity_id}", response_model=OpportunityEnvelope)
async def get_opportunity(
    opportunity_id: str,
    service: OpportunityService = Depends(get_opportunity_service),
):
    record = await service.get(parse_opportunity_id(opportunity_id))
    return OpportunityEnvelope(data=OpportunityResponse.model_validate(record))


# ─── Writes ──────────────────────────────────────────────────────

@router.post(
    "", response_model=OpportunityWriteResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_opportunity(
    body: OpportunityCreate,
    identity: Identity = Depends(require_identity),
    service: OpportunityService = Depends(get_opportunity_service),
):
    """Create an opportunity owned by the authenticated caller."""
    record = await service.create(body, identity)
    return OpportunityWriteResponse(
        message="Opportunity created successfully",
        data=OpportunityResponse.model_validate(record),
    )


@router.api_route(
    "/{opportunity_id}", methods=["PUT", "PATCH"],
    response_model=OpportunityWriteResponse,
)
async def update_opportunity(
    opportunity_id: str,
    body: OpportunityUpdate,
    authorization: str | None = Header(None),
    service: OpportunityService = Depends(get_opportunity_service),
):
    """Apply a partial update. Owner only."""
    record = await service.update(
        parse_opportunity_id(opportunity_id), body, authorization,
    )
    return OpportunityWriteResponse(
        message="Opportunity updated successfully",
        data=OpportunityResponse.model_validate(record),
    )


@router.delete("/{opportunity_id}", response_model=MessageResponse)
async def delete_opportunity(
    opportunity_id: str,
    authorization: str | None = Header(None),
    service: OpportunityService = Depends(get_opportunity_service),
):
    """Hard-delete an opportunity. Owner only."""
    await service.delete(parse_opportunity_id(opportunity_id), authorization)
    return MessageResponse(message="Opportunity deleted successfully")
