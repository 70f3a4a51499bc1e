"""Services Layer — IO shell around the pure rules in core/.

Invariants:
    - Services receive an AsyncSession; they never create engines or read settings globals
    - Authorization happens before any aggregator/reconciler call (routes enforce order)
"""
