"""Pydantic Schemas — dashboard form validation before anything reaches the backend.

Invariants:
    - Schemas validate at the system boundary (HTML form input)
    - Domain types from core/ used for enum fields
    - to_payload() produces the exact JSON body the backend expects
"""
