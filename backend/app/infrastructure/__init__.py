"""Infrastructure Layer — database sessions, credential verification, logging.

Invariants:
    - Infrastructure maps third-party exceptions onto core/errors.py types
"""
