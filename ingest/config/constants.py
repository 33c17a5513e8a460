"""
Static constants configuration.

Limits, index names and key layout values that don't change based on
environment.
"""

# =============================================================================
# FILE POLICY
# =============================================================================

BYTES_PER_MB = 1024 * 1024

MAX_PDF_SIZE_BYTES = 10 * BYTES_PER_MB  # 10 MiB
MAX_IMAGE_SIZE_BYTES = 5 * BYTES_PER_MB  # 5 MiB

ALLOWED_PDF_TYPES = ("application/pdf",)
ALLOWED_IMAGE_TYPES = (
  "image/jpeg",
  "image/jpg",
  "image/png",
  "image/gif",
  "image/webp",
)
ALLOWED_MIME_TYPES = ALLOWED_PDF_TYPES + ALLOWED_IMAGE_TYPES

IMAGE_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "webp", "svg")

# =============================================================================
# STORAGE KEY LAYOUT
# =============================================================================

PDF_KEY_PREFIX = "pdf"
IMAGE_KEY_PREFIX = "images"
STORAGE_KEY_SEGMENTS = 6

# Only direct PUT uploads advance a record
OBJECT_CREATED_PUT_EVENT = "ObjectCreated:Put"

# =============================================================================
# METADATA TABLE
# =============================================================================

OWNER_KEY_PREFIX = "USER#"
FILE_KEY_PREFIX = "FILE#"

FILE_ID_INDEX = "FileIdIndex"
STATUS_EXPIRES_AT_INDEX = "StatusExpiresAtIndex"

# Cleanup runs on a schedule, so leave room for its latency
DELETE_AFTER_GRACE_HOURS = 48

# Bounded scan for records created before expiry tracking existed
LEGACY_SWEEP_SCAN_LIMIT = 100

# =============================================================================
# API LIMITS
# =============================================================================

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

DEFAULT_UPLOAD_URL_EXPIRY_SECONDS = 300  # 5 minutes
DEFAULT_DOWNLOAD_URL_EXPIRY_SECONDS = 3600  # 1 hour

# =============================================================================
# RESOURCE TAGS
# =============================================================================

RESOURCE_TAG_PROJECT = "ingest"
RESOURCE_TAG_MANAGED_BY = "ingest"
