"""Web App Route - serves the React build with an SPA fallback.

Invariants:
    - Registered last: every API route takes precedence
    - web_version=2 cookie selects web_directory_v2, anything else web_directory
    - Paths whose last segment has no extension get index.html (client-side routing)
    - Other paths are served as files from the selected directory, never outside it
    - Missing index.html or file -> 404; unknown /api/ paths -> 404, never index.html
    - A page load with ?referrer=<address or username> keeps it in tru-referrer until
      /register reads it
"""

import os

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse

from octopus.api.cookies import set_referrer_cookie
from octopus.config import Settings, get_settings
from octopus.core.errors import ResourceNotFoundError
from octopus.core.sessions import WEB_VERSION_COOKIE_NAME

router = APIRouter(tags=["web"])

MAX_REFERRER_LENGTH = 64


def _web_directory(request: Request, settings: Settings) -> str:
    if request.cookies.get(WEB_VERSION_COOKIE_NAME) == "2":
        return settings.web_directory_v2
    return settings.web_directory


@router.get("/{path:path}", include_in_schema=False)
async def serve_web_app(
    path: str, request: Request, settings: Settings = Depends(get_settings),
):
    if path == "api" or path.startswith("api/"):
        raise ResourceNotFoundError("Route", f"/{path}")

    root = os.path.abspath(_web_directory(request, settings))
    if not os.path.splitext(os.path.basename(path))[1]:
        index = os.path.join(root, "index.html")
        if not os.path.isfile(index):
            raise ResourceNotFoundError("File", "index.html")
        response = FileResponse(index, media_type="text/html")
        referrer = request.query_params.get("referrer", "").strip()
        if referrer and len(referrer) <= MAX_REFERRER_LENGTH:
            set_referrer_cookie(response, settings, referrer)
        return response

    target = os.path.abspath(os.path.join(root, path))
    if os.path.commonpath([root, target]) != root or not os.path.isfile(target):
        raise ResourceNotFoundError("File", path)
    return FileResponse(target)
