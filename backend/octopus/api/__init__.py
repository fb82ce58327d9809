"""API Layer - truapi REST routes, cookie helpers, middleware and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Errors leave the API as the OctopusError JSON envelope
"""
