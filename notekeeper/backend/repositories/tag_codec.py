"""
Tag Codec.

Converts a note's ordered tag list to the text scalar stored in the
`notes.tags` column and back. Stored form is a JSON array of strings,
e.g. '["work", "meeting"]'.

Encoding happens on every write path that touches tags and decoding on
every read path. Anything that does not decode to a list of non-empty
strings is a storage-integrity failure and raises StorageError.
"""

import json
from collections.abc import Iterable

from notekeeper.backend.core.exceptions import StorageError


def encode_tags(tags: Iterable[str]) -> str:
    """
    Encode an ordered sequence of tags for storage.

    Order and duplicates are preserved.
    """
    return json.dumps(list(tags), ensure_ascii=False)


def decode_tags(raw: str | None, note_id: str | None = None) -> list[str]:
    """
    Decode a stored tag scalar into an ordered list of tags.

    Args:
        raw: Value of the `tags` column
        note_id: Owning note, used in the error message

    Returns:
        Tags in stored order

    Raises:
        StorageError: If the value is not a JSON array of non-empty strings
    """
    where = f" for note {note_id}" if note_id else ""

    if raw is None:
        raise StorageError(f"Missing tag data{where}")

    try:
        value = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise StorageError(f"Malformed tag data{where}: {exc}") from exc

    if not isinstance(value, list):
        raise StorageError(f"Malformed tag data{where}: expected a list")

    for tag in value:
        if not isinstance(tag, str) or not tag:
            raise StorageError(f"Malformed tag data{where}: invalid tag {tag!r}")

    return value
