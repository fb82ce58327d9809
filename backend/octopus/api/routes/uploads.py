"""Upload Routes - presigned S3 PUT URLs so clients upload images directly."""

from fastapi import APIRouter, Depends, Query

from octopus.api.dependencies import get_storage
from octopus.core.errors import BusinessRuleError
from octopus.infrastructure.storage import ObjectStorage

router = APIRouter(prefix="/api/v1", tags=["uploads"])

ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}


@router.get("/presigned")
async def presigned_upload(
    filename: str = Query(..., min_length=1, max_length=256),
    content_type: str = Query(...),
    storage: ObjectStorage = Depends(get_storage),
):
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise BusinessRuleError(f"Unsupported content type {content_type}", "INVALID_CONTENT_TYPE")
    key = storage.new_key(filename)
    return {
        "url": storage.presigned_put_url(key, content_type),
        "key": key,
        "asset_url": storage.object_url(key),
    }
