"""
High-level use cases for the portal.

Each service module orchestrates the record store and the persistence
adapter to implement business rules (create a student, import a backup,
log in, sign up, etc.).

Routers (FastAPI endpoints) call these services instead of manipulating the
storage backend directly.
"""
