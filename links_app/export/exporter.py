"""
Export orchestrator.

Runs two worker threads joined by a bounded ReportPipe:

    cursor -> flatten -> encode_csv -> pipe.write   (producer)
    pipe.read -> storage.upload                     (consumer)

The export succeeds only if both sides succeed.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Select
from sqlalchemy.engine import Engine

from links_app.config import settings
from links_app.storage.keys import StorageFolder
from links_app.storage.strategies import ReportStorageStrategy, UploadedReport
from .cursor import build_export_statement, open_cursor
from .pipe import PipeClosedError, ReportPipe
from .transform import encode_csv, flatten_batches

logger = logging.getLogger(__name__)

REPORT_CONTENT_TYPE = "text/csv"


def report_file_name(now: Optional[datetime] = None) -> str:
    """links-2024-01-01T10:00:00.000Z.csv (UTC, millisecond precision)"""
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    stamp = now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return f"links-{stamp}.csv"


class LinkExporter:
    """
    Streams the links table into a CSV report in object storage.
    
    Memory stays bounded whatever the table size: the cursor holds
    ``batch_size`` rows and the pipe holds ``buffer_size`` bytes.
    """
    
    def __init__(
        self,
        engine: Engine,
        storage: ReportStorageStrategy,
        batch_size: int = None,
        buffer_size: int = None,
    ):
        """
        Args:
            engine: Engine to borrow one connection from
            storage: Where the report is uploaded
            batch_size: Rows per cursor fetch (default from settings)
            buffer_size: Max bytes between encoder and uploader (default from settings)
        """
        self.engine = engine
        self.storage = storage
        self.batch_size = settings.export_batch_size if batch_size is None else batch_size
        self.buffer_size = settings.export_buffer_size if buffer_size is None else buffer_size
    
    async def export(self) -> UploadedReport:
        """
        Run the export and return the uploaded report.
        
        Raises the first real error of either side. The other side is
        unblocked through the pipe and awaited before raising, so the
        cursor and its connection are always released.
        """
        statement = build_export_statement()
        logger.debug("Export query: %s", statement)
        
        pipe = ReportPipe(max_buffer_size=self.buffer_size)
        file_name = report_file_name()
        
        encode_task = asyncio.create_task(
            asyncio.to_thread(self._write_report, statement, pipe)
        )
        upload_task = asyncio.create_task(
            asyncio.to_thread(self._upload_report, pipe, file_name)
        )
        tasks = {encode_task, upload_task}
        
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        
        errors = [task.exception() for task in done if task.exception() is not None]
        if errors:
            pipe.abort(errors[0])
            if pending:
                await asyncio.wait(pending)
            errors += [task.exception() for task in pending if task.exception() is not None]
            error = self._root_cause(errors, pipe)
            logger.error("Links export failed: %r", error)
            raise error
        
        report = upload_task.result()
        logger.info("Links exported to %s", report.key)
        return report
    
    def _write_report(self, statement: Select, pipe: ReportPipe) -> int:
        """Producer: drain the cursor into the pipe. Returns the number of CSV lines."""
        lines = 0
        try:
            with self.engine.connect() as connection:
                with open_cursor(connection, statement, self.batch_size) as batches:
                    for chunk in encode_csv(flatten_batches(batches)):
                        pipe.write(chunk)
                        lines += 1
        except BaseException as exc:
            pipe.abort(exc)
            raise
        pipe.close()
        logger.debug("Wrote %d CSV lines", lines)
        return lines
    
    def _upload_report(self, pipe: ReportPipe, file_name: str) -> UploadedReport:
        """Consumer: hand the read side of the pipe to the storage backend."""
        try:
            report = self.storage.upload(
                pipe,
                folder=StorageFolder.REPORTS.value,
                file_name=file_name,
                content_type=REPORT_CONTENT_TYPE,
            )
        except BaseException as exc:
            pipe.abort(exc)
            raise
        if not pipe.at_eof:
            error = PipeClosedError("upload finished before the report was fully written")
            pipe.abort(error)
            raise error
        return report
    
    @staticmethod
    def _root_cause(errors, pipe: ReportPipe) -> BaseException:
        # Each side aborts the pipe before raising, so pipe.error came first.
        # A PipeClosedError is only a symptom of the other side failing.
        if pipe.error is not None and not isinstance(pipe.error, PipeClosedError):
            return pipe.error
        for error in errors:
            if not isinstance(error, PipeClosedError):
                return error
        return pipe.error or errors[0]
