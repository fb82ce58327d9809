"""Infrastructure Layer - external service clients and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Every external failure is mapped to a core/errors.py type (DatabaseError,
      ChainQueryError, PushGatewayError)
"""
