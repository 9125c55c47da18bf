"""Services Layer — record-store operations and the authorization gate.

Invariants:
    - Services receive an AsyncSession per request; they never create engines
    - SQL is built from resolved core queries, never from raw request input
"""
