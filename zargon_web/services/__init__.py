"""Services Layer — proxy forwarding, dashboard gateway and session auth.

Invariants:
    - Services never render templates or build FastAPI routers
    - Proxy forwarding relays; the dashboard gateway raises
"""
