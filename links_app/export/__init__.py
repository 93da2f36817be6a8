"""
Streaming CSV export of the links table.

cursor -> flatten -> CSV encoder -> pipe -> report storage upload
"""

from .cursor import build_export_statement, open_cursor
from .exporter import LinkExporter, REPORT_CONTENT_TYPE, report_file_name
from .pipe import PipeClosedError, ReportPipe
from .transform import REPORT_COLUMNS, encode_csv, flatten_batches

__all__ = [
    "build_export_statement",
    "open_cursor",
    "LinkExporter",
    "REPORT_CONTENT_TYPE",
    "report_file_name",
    "PipeClosedError",
    "ReportPipe",
    "REPORT_COLUMNS",
    "encode_csv",
    "flatten_batches",
]
