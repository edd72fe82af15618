"""Pydantic Schemas - request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Domain enums from core/ used for category path parameters

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
    - Game responses are core snapshots, not re-modelled here
"""
