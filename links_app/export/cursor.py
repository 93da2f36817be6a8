"""
Cursor reader: pulls the ordered links table back in bounded batches.
"""

from contextlib import contextmanager
from typing import Iterator, List

from sqlalchemy import RowMapping, Select, select
from sqlalchemy.engine import Connection

from links_app.models.link import Link

Batch = List[RowMapping]


def build_export_statement() -> Select:
    """SELECT * FROM links ORDER BY created_at DESC (id breaks ties)"""
    links = Link.__table__
    return select(links).order_by(links.c.created_at.desc(), links.c.id.desc())


@contextmanager
def open_cursor(
    connection: Connection,
    statement: Select,
    batch_size: int,
) -> Iterator[Iterator[Batch]]:
    """
    Execute ``statement`` and yield a lazy iterator of row batches.
    
    ``yield_per`` switches on server-side cursors for dialects that have
    them (PostgreSQL), so only ``batch_size`` rows are fetched at a time.
    The result is closed on every exit path, including when the consumer
    stops early or fails.
    
    Args:
        connection: Connection borrowed for the whole export
        statement: Already ordered SELECT
        batch_size: Rows per fetch, must be positive
    """
    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    
    result = connection.execution_options(yield_per=batch_size).execute(statement)
    try:
        yield (list(partition) for partition in result.mappings().partitions(batch_size))
    finally:
        result.close()
