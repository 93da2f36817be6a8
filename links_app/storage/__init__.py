"""
Report storage module.

This module implements the Strategy Pattern for pluggable object storage
of exported CSV reports.
"""

from .strategies import (
    ReportStorageStrategy,
    S3ReportStorage,
    LocalReportStorage,
    InMemoryReportStorage,
    UploadedReport,
)
from .factory import ReportStorageFactory, ReportStorageBackend
from .keys import StorageFolder, build_public_url, build_storage_key, sanitize_file_name

__all__ = [
    "ReportStorageStrategy",
    "S3ReportStorage",
    "LocalReportStorage",
    "InMemoryReportStorage",
    "UploadedReport",
    "ReportStorageFactory",
    "ReportStorageBackend",
    "StorageFolder",
    "build_public_url",
    "build_storage_key",
    "sanitize_file_name",
]
