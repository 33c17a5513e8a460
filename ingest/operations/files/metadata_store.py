"""
DynamoDB-backed metadata store for file records.

Access paths:
- Primary key (owner partition, file sort key): create, get, update, list
- FileIdIndex: get_by_id
- StatusExpiresAtIndex: sweep of expired pending uploads

Every hot-path read is an index-backed query or point lookup. The only scan
is the bounded legacy sweep for records created before expiry tracking.
"""

import base64
import binascii
import json
from dataclasses import replace
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional

from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError

from ingest.config.constants import (
  FILE_ID_INDEX,
  FILE_KEY_PREFIX,
  LEGACY_SWEEP_SCAN_LIMIT,
  MAX_PAGE_SIZE,
  STATUS_EXPIRES_AT_INDEX,
)
from ingest.exceptions import (
  DuplicateFileError,
  FileRecordNotFoundError,
  MetadataStoreError,
  StatusConflictError,
)
from ingest.logger import logger
from ingest.models.file_record import (
  FileRecord,
  FileStatus,
  compute_delete_after,
  owner_partition_key,
  parse_iso,
  primary_key,
  utc_now_iso,
)
from ingest.operations.files.contracts import FilePage

# Record attributes that update() may change, mapped to item attribute names
UPDATABLE_FIELDS = {
  "file_name": "fileName",
  "mime_type": "mimeType",
  "size_bytes": "sizeBytes",
  "status": "status",
  "storage_bucket": "storageBucket",
  "storage_key": "storageKey",
  "uploaded_at": "uploadedAt",
  "url_expires_at": "urlExpiresAt",
  "delete_after": "deleteAfter",
}


def encode_cursor(last_key: Dict[str, Any]) -> str:
  payload = json.dumps({"PK": last_key["PK"], "SK": last_key["SK"]})
  return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii")


def decode_cursor(cursor: Optional[str], owner_id: str) -> Optional[Dict[str, str]]:
  """
  Decode a continuation cursor for an owner's partition.

  Anything unparseable, or a cursor minted for another owner, yields None so
  the listing starts from the beginning.
  """
  if not cursor:
    return None
  try:
    decoded = json.loads(base64.urlsafe_b64decode(cursor.encode("ascii")))
  except (binascii.Error, ValueError, UnicodeError):
    logger.debug("Ignoring malformed list cursor")
    return None

  if not isinstance(decoded, dict):
    return None
  pk, sk = decoded.get("PK"), decoded.get("SK")
  if not isinstance(pk, str) or not isinstance(sk, str):
    return None
  if pk != owner_partition_key(owner_id) or not sk.startswith(FILE_KEY_PREFIX):
    logger.debug("Ignoring list cursor for a different partition")
    return None
  return {"PK": pk, "SK": sk}


def _error_code(error: ClientError) -> str:
  return error.response.get("Error", {}).get("Code", "")


class DynamoMetadataStore:
  """Metadata store over a single DynamoDB table with two GSIs."""

  def __init__(self, table, clock: Callable[[], str] = utc_now_iso):
    """
    Args:
        table: boto3 DynamoDB Table resource for the files table
        clock: Returns the current time as an ISO-8601 string
    """
    self.table = table
    self.clock = clock

  @property
  def table_name(self) -> str:
    return self.table.name

  def create(self, record: FileRecord) -> FileRecord:
    """
    Insert a new record.

    Pending records with an upload deadline get their `delete_after`
    watermark (and table TTL) derived here. `url_expires_at` is dropped
    unless the record is pending and `uploaded_at` unless it is uploaded.

    Raises:
        DuplicateFileError: If (owner_id, file_id) already exists
        MetadataStoreError: If the write fails
    """
    now = self.clock()
    record = replace(
      record,
      created_at=record.created_at or now,
      updated_at=record.updated_at or now,
    )
    if record.status != FileStatus.PENDING_UPLOAD:
      record = replace(record, url_expires_at=None)
    if record.status != FileStatus.UPLOADED:
      record = replace(record, uploaded_at=None)
    if record.url_expires_at:
      record = replace(record, delete_after=compute_delete_after(record.url_expires_at))
    else:
      record = replace(record, delete_after=None)

    try:
      self.table.put_item(
        Item=record.to_item(),
        ConditionExpression="attribute_not_exists(PK)",
      )
    except ClientError as e:
      if _error_code(e) == "ConditionalCheckFailedException":
        raise DuplicateFileError(record.owner_id, record.file_id)
      raise MetadataStoreError("put_item", self.table_name, str(e)) from e

    logger.debug(
      f"Created file record {record.file_id} with status {record.status.value}",
      extra={"file_id": record.file_id, "owner_id": record.owner_id},
    )
    return record

  def get(self, owner_id: str, file_id: str) -> Optional[FileRecord]:
    """Point lookup by primary key. Returns None when absent."""
    try:
      response = self.table.get_item(Key=primary_key(owner_id, file_id))
    except ClientError as e:
      raise MetadataStoreError("get_item", self.table_name, str(e)) from e

    item = response.get("Item")
    return FileRecord.from_item(item) if item else None

  def get_by_id(self, file_id: str) -> Optional[FileRecord]:
    """
    Point lookup through the FileIdIndex.

    The index is an eventually consistent projection, so a record created
    moments ago may not be visible yet; callers fall back to get().
    """
    try:
      response = self.table.query(
        IndexName=FILE_ID_INDEX,
        KeyConditionExpression=Key("fileId").eq(file_id),
      )
    except ClientError as e:
      raise MetadataStoreError("query", self.table_name, str(e)) from e

    items = response.get("Items", [])
    if len(items) > 1:
      logger.warning(
        f"FileIdIndex returned {len(items)} records for fileId {file_id}",
        extra={"file_id": file_id},
      )
    return FileRecord.from_item(items[0]) if items else None

  def update(
    self,
    owner_id: str,
    file_id: str,
    fields: Mapping[str, Any],
    expected_status: Optional[FileStatus] = None,
  ) -> None:
    """
    Merge the supplied fields into an existing record.

    `updated_at` is always refreshed, so every call writes. A field set to
    None is removed from the item. When `expected_status` is given the write
    only happens if the persisted status still matches.

    Raises:
        ValueError: If a field is not updatable
        FileRecordNotFoundError: If the record does not exist
        StatusConflictError: If the persisted status differs from expected_status
        MetadataStoreError: If the write fails
    """
    unknown = set(fields) - set(UPDATABLE_FIELDS)
    if unknown:
      raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

    names: Dict[str, str] = {"#updatedAt": "updatedAt"}
    values: Dict[str, Any] = {":updatedAt": self.clock()}
    set_clauses = ["#updatedAt = :updatedAt"]
    remove_clauses: List[str] = []

    for field_name, value in fields.items():
      attribute = UPDATABLE_FIELDS[field_name]
      placeholder = f"#{attribute}"
      names[placeholder] = attribute
      if value is None:
        remove_clauses.append(placeholder)
        continue
      if isinstance(value, FileStatus):
        value = value.value
      values[f":{attribute}"] = value
      set_clauses.append(f"{placeholder} = :{attribute}")

    # Keep the numeric TTL in step with the deletion watermark
    if "delete_after" in fields:
      names["#ttl"] = "ttl"
      if fields["delete_after"] is None:
        remove_clauses.append("#ttl")
      else:
        values[":ttl"] = int(parse_iso(fields["delete_after"]).timestamp())
        set_clauses.append("#ttl = :ttl")

    expression = "SET " + ", ".join(set_clauses)
    if remove_clauses:
      expression += " REMOVE " + ", ".join(remove_clauses)

    condition = "attribute_exists(PK)"
    if expected_status is not None:
      names["#status"] = "status"
      values[":expectedStatus"] = FileStatus(expected_status).value
      condition += " AND #status = :expectedStatus"

    try:
      self.table.update_item(
        Key=primary_key(owner_id, file_id),
        UpdateExpression=expression,
        ConditionExpression=condition,
        ExpressionAttributeNames=names,
        ExpressionAttributeValues=values,
      )
    except ClientError as e:
      if _error_code(e) != "ConditionalCheckFailedException":
        raise MetadataStoreError("update_item", self.table_name, str(e)) from e
      if expected_status is not None and self.get(owner_id, file_id) is not None:
        raise StatusConflictError(file_id, FileStatus(expected_status).value)
      raise FileRecordNotFoundError(file_id, owner_id)

  def list(self, owner_id: str, limit: int, cursor: Optional[str] = None) -> FilePage:
    """
    Page through an owner's files in descending sort-key (newest first) order.

    Fetches one extra item to know whether another page exists, so
    `next_cursor` is only returned when more records remain.
    """
    if limit < 1:
      raise ValueError("limit must be a positive integer")
    limit = min(limit, MAX_PAGE_SIZE)

    query_args: Dict[str, Any] = {
      "KeyConditionExpression": Key("PK").eq(owner_partition_key(owner_id))
      & Key("SK").begins_with(FILE_KEY_PREFIX),
      "ScanIndexForward": False,
      "Limit": limit + 1,
    }
    start_key = decode_cursor(cursor, owner_id)
    if start_key:
      query_args["ExclusiveStartKey"] = start_key

    try:
      response = self.table.query(**query_args)
    except ClientError as e:
      raise MetadataStoreError("query", self.table_name, str(e)) from e

    items = response.get("Items", [])
    next_cursor = None
    if len(items) > limit:
      items = items[:limit]
      next_cursor = encode_cursor(items[-1])
    elif response.get("LastEvaluatedKey") and items:
      # Page cut short by the response size cap
      next_cursor = encode_cursor(items[-1])

    return FilePage(
      records=[FileRecord.from_item(item) for item in items],
      next_cursor=next_cursor,
    )

  def sweep_expired(self, now_threshold: str) -> int:
    """
    Delete pending records whose upload URL expired before `now_threshold`.

    Deletions are individual and status-guarded, so a record that completed
    its upload after the index was read is left alone. A failed deletion is
    logged and the sweep continues. Returns the number of records deleted.
    """
    deleted = 0

    for item in self._expired_pending_items(now_threshold):
      if self._delete_pending(item):
        deleted += 1

    for item in self._legacy_pending_items():
      if self._delete_pending(item):
        deleted += 1

    logger.info(
      f"Expiry sweep deleted {deleted} pending file record(s) older than {now_threshold}"
    )
    return deleted

  def _expired_pending_items(self, now_threshold: str) -> Iterator[Dict[str, Any]]:
    query_args: Dict[str, Any] = {
      "IndexName": STATUS_EXPIRES_AT_INDEX,
      "KeyConditionExpression": Key("status").eq(FileStatus.PENDING_UPLOAD.value)
      & Key("urlExpiresAt").lt(now_threshold),
    }
    while True:
      try:
        response = self.table.query(**query_args)
      except ClientError as e:
        raise MetadataStoreError("query", self.table_name, str(e)) from e
      yield from response.get("Items", [])
      last_key = response.get("LastEvaluatedKey")
      if not last_key:
        break
      query_args["ExclusiveStartKey"] = last_key

  def _legacy_pending_items(self) -> List[Dict[str, Any]]:
    """Pending records with no urlExpiresAt at all, from one bounded scan."""
    try:
      response = self.table.scan(
        FilterExpression=Attr("status").eq(FileStatus.PENDING_UPLOAD.value)
        & Attr("urlExpiresAt").not_exists(),
        Limit=LEGACY_SWEEP_SCAN_LIMIT,
      )
    except ClientError as e:
      logger.error(f"Legacy pending record scan failed: {e}")
      return []
    return response.get("Items", [])

  def _delete_pending(self, item: Dict[str, Any]) -> bool:
    file_id = item.get("fileId")
    try:
      self.table.delete_item(
        Key={"PK": item["PK"], "SK": item["SK"]},
        ConditionExpression="#status = :pending",
        ExpressionAttributeNames={"#status": "status"},
        ExpressionAttributeValues={":pending": FileStatus.PENDING_UPLOAD.value},
      )
    except ClientError as e:
      if _error_code(e) == "ConditionalCheckFailedException":
        logger.info(
          f"Skipping expired record {file_id}: no longer pending",
          extra={"file_id": file_id},
        )
      else:
        logger.error(
          f"Failed to delete expired file record {file_id}: {e}",
          extra={"file_id": file_id},
        )
      return False
    except Exception as e:
      logger.error(
        f"Failed to delete expired file record {file_id}: {e}",
        extra={"file_id": file_id},
      )
      return False

    logger.debug(f"Deleted expired file record {file_id}", extra={"file_id": file_id})
    return True
