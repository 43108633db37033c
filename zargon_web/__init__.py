"""Zargon Inventory Web — dashboard front-end and backend API proxy.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
    - All business logic lives on the backend at API_BASE_URL
"""
