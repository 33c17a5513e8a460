"""
ULID (Universally Unique Lexicographically Sortable Identifier) utilities.

File ids are ULIDs so that the `FILE#{fileId}` sort key in the files table is
time-ordered: a descending query over an owner's partition returns files
newest first.
"""

from ulid import ULID


def generate_ulid() -> str:
  """
  Generate a time-ordered ULID.

  Returns:
      A string representation of a ULID (26 characters).
      Example: "01ARZ3NDEKTSV4RRFFQ69G5FAV"
  """
  return str(ULID())
