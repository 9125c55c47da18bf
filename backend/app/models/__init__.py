"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Opportunity is the aggregate root; OpportunityTag rows are owned by it

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from app.models.opportunity import Opportunity  # noqa: F401
from app.models.opportunity_tag import OpportunityTag  # noqa: F401
