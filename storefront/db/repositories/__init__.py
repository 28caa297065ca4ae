"""
Per-domain repository modules for database access.

Each module exposes plain functions taking a ``Session``; routers call these
instead of issuing ORM queries inline.
"""
