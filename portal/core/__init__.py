"""
Core utilities shared across the portal.

This package hosts configuration helpers (env vars, storage paths, feature
flags), logging setup and small helpers used by services and routers.
Services should depend on these primitives instead of reading os.environ.
"""
