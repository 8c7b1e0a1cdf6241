"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate JSON shape at the system boundary
    - Domain enums from core/ used for enum fields in responses

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
