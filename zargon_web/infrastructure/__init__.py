"""Infrastructure Layer — backend HTTP client and cross-cutting concerns.

Invariants:
    - Every backend call goes through ResilientBackendClient
    - Transport failures are mapped to core/errors.py types, never leaked raw
"""
