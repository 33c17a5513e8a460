"""Ingest Service API main application module."""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ingest.config import env
from ingest.config.logging import get_logger
from ingest.config.validation import EnvValidator
from ingest.middleware import StructuredLoggingMiddleware
from ingest.models.api.common import error_body
from ingest.routers import router as v1_router

logger = get_logger("ingest.api")

INVALID_BODY_MESSAGE = (
  "Invalid or missing request body. "
  "Expected JSON with fields: fileName, mimeType, fileSizeBytes"
)


def _service_version() -> str:
  try:
    return pkg_version("ingest-service")
  except PackageNotFoundError:
    return "0.0.0"


def create_app() -> FastAPI:
  """
  Create the FastAPI app and include the routers.

  Returns:
      FastAPI: The configured FastAPI application.
  """
  app = FastAPI(
    title="Ingest API",
    version=_service_version(),
    description="Presigned uploads and lifecycle tracking for ingested files.",
    openapi_url="/openapi.json",
  )

  @app.on_event("startup")
  async def startup_event():
    """Validate configuration on startup."""
    logger.info("Starting Ingest API...")
    try:
      EnvValidator.validate_required_vars(env)
    except Exception as e:
      logger.error(f"Configuration validation failed: {e}")
      if env.is_production():
        raise
      logger.warning("Continuing with invalid configuration (development mode)")
    logger.info("Ingest API startup complete")

  app.add_middleware(StructuredLoggingMiddleware)

  @app.get("/health", include_in_schema=False)
  async def health():
    return {"success": True, "status": "healthy"}

  @app.exception_handler(RequestValidationError)
  async def validation_exception_handler(
    request: Request, exc: RequestValidationError
  ) -> JSONResponse:
    logger.info(f"Rejected malformed request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
      status_code=status.HTTP_400_BAD_REQUEST,
      content=error_body(INVALID_BODY_MESSAGE),
    )

  @app.exception_handler(Exception)
  async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Flat error envelope for anything a route didn't handle."""
    request_id = getattr(request.state, "request_id", None)
    logger.error(
      "Unhandled exception", extra={"request_id": request_id}, exc_info=True
    )
    return JSONResponse(
      status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
      content=error_body(f"Internal server error: {exc}"),
    )

  app.include_router(v1_router)

  return app


app = create_app()
