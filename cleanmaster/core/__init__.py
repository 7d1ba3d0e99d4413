"""
Core utilities shared across the records store.

This package hosts configuration helpers (env vars, storage paths, the
reference policy) and the logging setup used by ``create_store``.
"""
