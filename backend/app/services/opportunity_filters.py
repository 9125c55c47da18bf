"""Opportunity Filters — translate a resolved OpportunityQuery into SQLAlchemy clauses.

Invariants:
    - Free-text search is one OR block over SEARCH_COLUMNS; every other filter ANDs on top
    - Substring matches are case-insensitive and escape LIKE wildcards (icontains autoescape)
    - Tag filter matches records sharing at least one tag, without duplicating rows
    - ORDER BY always ends with id ASC so pages are stable when the sort key ties
"""

from sqlalchemy import ColumnElement, Select, or_, select, func
from sqlalchemy.orm import InstrumentedAttribute

from app.core.domain_types import SortDirection
from app.core.query_resolver import OpportunityFilter, OpportunityQuery, SortSpec
from app.models.opportunity import Opportunity
from app.models.opportunity_tag import OpportunityTag

SEARCH_COLUMNS: tuple[InstrumentedAttribute, ...] = (
    Opportunity.title,
    Opportunity.description,
    Opportunity.location,
    Opportunity.organization,
    Opportunity.requirements,
)


def build_where_clauses(flt: OpportunityFilter) -> list[ColumnElement[bool]]:
    clauses: list[ColumnElement[bool]] = []
    if flt.search:
        clauses.append(or_(
            *(col.icontains(flt.search, autoescape=True) for col in SEARCH_COLUMNS)
        ))
    if flt.include_categories:
        clauses.append(Opportunity.category.in_(
            sorted(c.value for c in flt.include_categories)
        ))
    if flt.exclude_categories:
        clauses.append(Opportunity.category.not_in(
            sorted(c.value for c in flt.exclude_categories)
        ))
    if flt.location:
        clauses.append(Opportunity.location.icontains(flt.location, autoescape=True))
    if flt.is_remote is not None:
        clauses.append(Opportunity.is_remote == flt.is_remote)
    if flt.organization:
        clauses.append(
            Opportunity.organization.icontains(flt.organization, autoescape=True),
        )
    if flt.tags:
        tagged = select(OpportunityTag.opportunity_id).where(
            OpportunityTag.tag.in_(flt.tags),
        )
        clauses.append(Opportunity.id.in_(tagged))
    return clauses


def build_order_by(sort: SortSpec) -> list[ColumnElement]:
    column = getattr(Opportunity, sort.attribute)
    primary = column.asc() if sort.direction is SortDirection.ASC else column.desc()
    return [primary, Opportunity.id.asc()]


def build_page_statement(query: OpportunityQuery) -> Select:
    """SELECT for one page of matching opportunities."""
    return (
        select(Opportunity)
        .where(*build_where_clauses(query.filter))
        .order_by(*build_order_by(query.sort))
        .offset(query.page.skip)
        .limit(query.page.take)
    )


def build_count_statement(query: OpportunityQuery) -> Select:
    """SELECT COUNT(*) over the same predicate, ignoring pagination and order."""
    return (
        select(func.count())
        .select_from(Opportunity)
        .where(*build_where_clauses(query.filter))
    )
