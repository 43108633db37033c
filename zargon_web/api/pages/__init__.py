"""Dashboard Page Modules — server-rendered HTML, one file per dashboard area.

Invariants:
    - GET renders; POST performs one backend action then redirects (PRG)
    - Failures surface as flash messages, never as raw JSON
"""
