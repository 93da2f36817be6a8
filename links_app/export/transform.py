"""
Row flattener and CSV encoder.

Both are generators, so rows are pulled from the cursor only as fast as
encoded bytes are consumed downstream.
"""

import csv
import io
from datetime import datetime
from typing import Any, Iterable, Iterator, Mapping, Sequence, Tuple

# (header, accepted field names): storage naming first, API naming second
REPORT_COLUMNS: Sequence[Tuple[str, Tuple[str, ...]]] = (
    ("ID", ("id",)),
    ("Original URL", ("url",)),
    ("Short URL", ("short_url", "shortUrl")),
    ("Access Count", ("access_count", "accessCount")),
    ("Created at", ("created_at", "createdAt")),
)


def flatten_batches(batches: Iterable[Sequence[Any]]) -> Iterator[Any]:
    """Yield every row of every batch, in order."""
    for batch in batches:
        yield from batch


def _get_field(row: Any, names: Tuple[str, ...]) -> Any:
    for name in names:
        if isinstance(row, Mapping):
            if name in row:
                return row[name]
        elif hasattr(row, name):
            return getattr(row, name)
    raise KeyError(f"Row has none of the fields {names!r}")


def _format_value(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def encode_csv(rows: Iterable[Any], encoding: str = "utf-8") -> Iterator[bytes]:
    """
    Encode rows as CSV, one chunk per line.
    
    The header is always emitted, even when ``rows`` is empty. Values with
    commas, quotes or newlines are quoted (csv.QUOTE_MINIMAL).
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=",", lineterminator="\n")
    
    def drain() -> bytes:
        line = buffer.getvalue()
        buffer.seek(0)
        buffer.truncate()
        return line.encode(encoding)
    
    writer.writerow([header for header, _ in REPORT_COLUMNS])
    yield drain()
    
    for row in rows:
        writer.writerow([_format_value(_get_field(row, names)) for _, names in REPORT_COLUMNS])
        yield drain()
