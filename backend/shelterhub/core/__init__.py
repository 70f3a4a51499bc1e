"""Core Layer — pure domain rules: access decisions, feed ordering, tag checks, report windows.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic (report windows take `now` explicitly)

Design Decisions:
    - Functional core separated from the IO shell in services/
"""
