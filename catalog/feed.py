"""Tab-separated feed decoding.

Rows are yielded one at a time so feeds larger than memory can be
processed. Each row is a dict keyed by the header line.
"""

import csv
from typing import Dict, Iterator, TextIO

from catalog.config import FEED_DELIMITER, FEED_PATH
from catalog.errors import DecodeError

__all__ = ["decode_rows", "read_feed"]


def decode_rows(stream: TextIO, delimiter: str = FEED_DELIMITER) -> Iterator[Dict[str, str]]:
    """Lazily decode delimited rows from an open text stream.

    Missing trailing cells decode as empty strings; quoting is disabled
    since the feed is plain tab-separated text.

    Args:
        stream: Text stream positioned at the header line
        delimiter: Field separator

    Yields:
        One field-name-to-value mapping per input row, in input order

    Raises:
        DecodeError: If the stream cannot be read or decoded
    """
    try:
        reader = csv.DictReader(stream, delimiter=delimiter, quoting=csv.QUOTE_NONE, restval="")
        for row in reader:
            # Extra cells beyond the header land under the None key
            row.pop(None, None)
            yield row
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise DecodeError(f"Failed to decode feed: {e}") from e


def read_feed(path: str = FEED_PATH) -> Iterator[Dict[str, str]]:
    """Open the feed file and decode its rows lazily.

    The file stays open until the iterator is exhausted or closed.

    Raises:
        DecodeError: If the file cannot be opened or read
    """
    try:
        f = open(path, "r", newline="", encoding="utf-8-sig")
    except OSError as e:
        raise DecodeError(f"Failed to open feed at {path}: {e}") from e

    with f:
        yield from decode_rows(f)
