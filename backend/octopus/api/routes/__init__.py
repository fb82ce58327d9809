"""Route Modules - one file per resource.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - web_app is registered last (catch-all SPA fallback)
"""
