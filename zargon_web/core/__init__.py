"""Core Layer — pure rules and tables, no IO, no async, no HTTP.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - All functions are pure and deterministic (dates injectable via ``today``/``now``)

Design Decisions:
    - Failure policies and the route table live here so they can be tested
      without a running backend
"""
