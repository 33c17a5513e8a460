"""
Common API models shared across routers.

Every response uses a flat envelope with a `success` flag; failures carry a
single human-readable `error` string.
"""

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
  """Standard error envelope returned by every endpoint."""

  model_config = ConfigDict(
    json_schema_extra={"example": {"success": False, "error": "File not found"}}
  )

  success: bool = Field(False, description="Always false for errors")
  error: str = Field(
    ...,
    description="Human-readable error message explaining what went wrong",
    examples=["File not found"],
  )


def error_body(message: str) -> dict:
  """Serialized error envelope for JSONResponse content."""
  return ErrorResponse(error=message).model_dump()
