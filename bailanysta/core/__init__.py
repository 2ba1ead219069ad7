"""
Core utilities shared across the Bailanysta backend.

This package hosts configuration (environment-backed Settings) and the
logging setup. Routers, services and the storage layer depend on these
primitives instead of reading os.environ or configuring handlers themselves.
"""
