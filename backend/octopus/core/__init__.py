"""Core Layer - pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic (clock passed in by callers)

Design Decisions:
    - Functional core separated from imperative shell: chain event mapping, mention
      translation and cookie payload rules are testable without a server
"""
