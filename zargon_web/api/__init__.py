"""API Layer — proxy routes, dashboard pages and error handlers.

Invariants:
    - Routers registered explicitly in main.py (no auto-discovery)
    - Handlers stay thin and delegate to services
"""
