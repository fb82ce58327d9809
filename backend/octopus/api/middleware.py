"""Anonymous Session Middleware - keeps a tru-session tracking cookie on web clients.

Invariants:
    - Mobile requests (x-mobile-request: true) get tru-session cleared, never issued
    - A valid, fresh tru-session is left untouched
    - A missing, tampered or stale tru-session is replaced with a new one
    - The request is always served; cookie problems never fail it
"""

from fastapi import Request

from octopus.api.cookies import (
    clear_anonymous_session_cookie,
    read_anonymous_session,
    set_anonymous_session_cookie,
)
from octopus.api.dependencies import secure_cookie_for
from octopus.config import get_settings

MOBILE_REQUEST_HEADER = "x-mobile-request"


async def anonymous_session_middleware(request: Request, call_next):
    settings = get_settings()
    codec = secure_cookie_for(settings)

    response = await call_next(request)
    if request.headers.get(MOBILE_REQUEST_HEADER) == "true":
        clear_anonymous_session_cookie(response, settings)
    elif read_anonymous_session(request, codec) is None:
        set_anonymous_session_cookie(response, codec, settings)
    return response
