"""Request and response models for the /v1/files endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from ingest.models.file_record import FileRecord, FileStatus


class FileUploadRequest(BaseModel):
  """
  Upload URL request.

  Fields are optional at the schema level so that missing values produce the
  service's own 400 envelope instead of a framework validation error.
  """

  model_config = ConfigDict(
    json_schema_extra={
      "example": {
        "fileName": "invoice.pdf",
        "mimeType": "application/pdf",
        "fileSizeBytes": 1048576,
      }
    }
  )

  fileName: str | None = Field(None, description="Original file name")
  mimeType: str | None = Field(None, description="MIME type the client will upload")
  fileSizeBytes: int | None = Field(None, description="Declared size in bytes")

  def is_complete(self) -> bool:
    return bool(
      self.fileName
      and self.fileName.strip()
      and self.mimeType
      and self.mimeType.strip()
      and self.fileSizeBytes
      and self.fileSizeBytes > 0
    )


class FileUploadResponse(BaseModel):
  success: bool = True
  fileId: str = Field(..., description="Identifier of the pending file record")
  uploadUrl: str = Field(..., description="Presigned S3 PUT URL")
  expiresAt: str = Field(..., description="ISO-8601 instant the URL stops working")
  maxSizeBytes: int = Field(..., description="Size ceiling for this file type")
  method: str = Field("PUT", description="HTTP method to use with uploadUrl")


class FileSummary(BaseModel):
  """One entry in a file listing."""

  id: str
  name: str
  mimeType: str
  sizeBytes: int
  status: FileStatus
  createdAt: str
  updatedAt: str
  uploadedAt: str | None = None

  @classmethod
  def from_record(cls, record: FileRecord) -> "FileSummary":
    return cls(
      id=record.file_id,
      name=record.file_name,
      mimeType=record.mime_type,
      sizeBytes=record.size_bytes,
      status=record.status,
      createdAt=record.created_at,
      updatedAt=record.updated_at,
      uploadedAt=record.uploaded_at,
    )


class FileInfoResponse(FileSummary):
  success: bool = True


class ListFilesResponse(BaseModel):
  success: bool = True
  files: list[FileSummary] = Field(default_factory=list)
  nextCursor: str | None = Field(
    None, description="Opaque cursor for the next page; absent on the last page"
  )


class DownloadUrlResponse(BaseModel):
  success: bool = True
  fileId: str
  downloadUrl: str = Field(..., description="Presigned S3 GET URL")
  expiresAt: str = Field(..., description="ISO-8601 instant the URL stops working")
  fileName: str
