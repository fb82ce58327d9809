"""Pydantic Schemas - truapi request/response contracts and chain object mirrors.

Invariants:
    - Schemas validate at system boundaries (client input, chain responses)
    - Domain enums from core/ are used for enum fields

Design Decisions:
    - Separate from models: schemas are contracts, models are persistence
"""
