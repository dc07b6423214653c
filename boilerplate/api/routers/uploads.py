"""Upload router: single, multiple and mixed-field multipart uploads."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile

from boilerplate.api.dependencies import get_upload_service
from boilerplate.api.limiter import limiter, strict_limit
from boilerplate.api.responses import success
from boilerplate.services import UploadService

router = APIRouter(prefix="/upload", tags=["upload"])

MULTIPLE_MAX_FILES = 5
MIX_MAX_COUNTS = {"avatar": 1, "idCards": 2}

UPLOADED = "Upload succeeded"


@router.post("")
@limiter.limit(strict_limit)
async def upload_single(
    request: Request,
    file: Optional[UploadFile] = File(None),
    uploads: UploadService = Depends(get_upload_service),
):
    """One file in the ``file`` field."""
    stored = await uploads.save_fields({"file": [file] if file else []}, max_counts={"file": 1})
    return success([s.to_dict() for s in stored], 200, UPLOADED)


@router.post("/multiple")
@limiter.limit(strict_limit)
async def upload_multiple(
    request: Request,
    files: Optional[List[UploadFile]] = File(None, alias="fileList"),
    uploads: UploadService = Depends(get_upload_service),
):
    """Up to five files in the ``fileList`` field."""
    stored = await uploads.save_fields(
        {"fileList": files}, max_counts={"fileList": MULTIPLE_MAX_FILES}
    )
    return success([s.to_dict() for s in stored], 200, UPLOADED)


@router.post("/mix")
@limiter.limit(strict_limit)
async def upload_mix(
    request: Request,
    avatar: Optional[List[UploadFile]] = File(None),
    id_cards: Optional[List[UploadFile]] = File(None, alias="idCards"),
    uploads: UploadService = Depends(get_upload_service),
):
    """One ``avatar`` plus up to two ``idCards`` in the same request."""
    stored = await uploads.save_fields(
        {"avatar": avatar, "idCards": id_cards}, max_counts=MIX_MAX_COUNTS
    )
    return success([s.to_dict() for s in stored], 200, UPLOADED)
