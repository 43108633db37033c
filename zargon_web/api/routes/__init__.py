"""Proxy Route Modules — one file per backend resource under /api.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Handlers only pick the ProxyRoute and call forward_request
"""
