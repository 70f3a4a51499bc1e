"""Schemas — Pydantic request/response models at the HTTP boundary.

Invariants:
    - Request bodies are validated here before any route logic runs
    - Response models read ORM rows and core dataclasses via from_attributes
"""
