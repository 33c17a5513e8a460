"""
File Upload Endpoint.

Issues presigned S3 PUT URLs. The client uploads the bytes directly to S3;
the bucket's ObjectCreated notification later marks the record UPLOADED.

Upload Workflow:
1. `POST /v1/files` with fileName, mimeType and fileSizeBytes
2. PUT the file to `uploadUrl` before `expiresAt`, with the same Content-Type
3. Poll `GET /v1/files/{fileId}` until status is UPLOADED
"""

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from ingest.logger import api_logger
from ingest.models.api.common import ErrorResponse, error_body
from ingest.models.api.files import FileUploadRequest, FileUploadResponse
from ingest.operations.files.contracts import UploadUrlIssuer
from ingest.routers.files.dependencies import get_owner_id, get_upload_service

MISSING_FIELDS_MESSAGE = "Missing required fields: fileName, mimeType, fileSizeBytes"

router = APIRouter()


@router.post(
  "/files",
  response_model=FileUploadResponse,
  status_code=status.HTTP_201_CREATED,
  operation_id="createFileUpload",
  summary="Create File Upload",
  description="""Generate a presigned S3 URL for a new file.

A PENDING_UPLOAD record is created before the URL is returned.

**Supported Types:**
- PDF: application/pdf, up to 10MB
- Images: jpeg, jpg, png, gif, webp, up to 5MB

**Important Notes:**
- The URL expires after a few minutes
- Expired, unused records are cleaned up automatically""",
  responses={
    201: {"description": "Upload URL generated successfully"},
    400: {"description": "Invalid request or file rejected", "model": ErrorResponse},
    500: {"description": "Internal server error", "model": ErrorResponse},
  },
)
def create_file_upload(
  request: FileUploadRequest = Body(...),
  owner_id: str = Depends(get_owner_id),
  upload_service: UploadUrlIssuer = Depends(get_upload_service),
):
  if not request.is_complete():
    return JSONResponse(
      status_code=status.HTTP_400_BAD_REQUEST,
      content=error_body(MISSING_FIELDS_MESSAGE),
    )

  result = upload_service.issue(
    owner_id, request.fileName, request.mimeType, request.fileSizeBytes
  )
  if not result.success:
    api_logger.info(
      f"Upload request rejected: {result.error}", extra={"owner_id": owner_id}
    )
    return JSONResponse(
      status_code=status.HTTP_400_BAD_REQUEST, content=error_body(result.error)
    )

  return FileUploadResponse(
    fileId=result.file_id,
    uploadUrl=result.upload_url,
    expiresAt=result.url_expires_at,
    maxSizeBytes=result.max_size_bytes,
    method=result.method,
  )
