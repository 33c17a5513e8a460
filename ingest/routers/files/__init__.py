"""
File lifecycle endpoints.

File Lifecycle:
1. POST /v1/files - Get a presigned URL; record starts PENDING_UPLOAD
2. Upload directly to S3 using the presigned URL
3. S3 notification marks the record UPLOADED
4. GET /v1/files/{fileId}/download - Presigned download URL
"""

from fastapi import APIRouter

from . import main, upload

router = APIRouter(
  tags=["Files"],
  responses={404: {"description": "File not found"}},
)

router.include_router(main.router)
router.include_router(upload.router)

__all__ = ["router"]
