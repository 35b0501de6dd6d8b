"""Infrastructure Layer — database sessions, logging and outbound HTTP clients.

Invariants:
    - Infrastructure never imports from core/ domain logic, except the error hierarchy
    - External calls wrapped with timeout and error mapping

Design Decisions:
    - Thin wrappers over raw clients (SQLAlchemy engine, httpx)
"""
