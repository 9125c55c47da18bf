"""API Layer — FastAPI routes, auth dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON envelopes

Design Decisions:
    - Thin routes delegate to services
"""
