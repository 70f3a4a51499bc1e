"""Infrastructure Layer — database, auth tokens, mail transport and logging setup.

Invariants:
    - Infrastructure never imports from services/
    - All external calls map failures onto core/errors.py types
"""
