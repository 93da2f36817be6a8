"""
Report storage strategies using Strategy Pattern.

Allows switching where exported reports are persisted:
- S3: Production (AWS S3, Cloudflare R2, MinIO...)
- Local: Development (plain files on disk)
- Memory: Tests and demos
"""

import logging
import os
import shutil
import tempfile
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO, Dict, Optional

from boto3.s3.transfer import TransferConfig

from .keys import build_public_url, build_storage_key

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class UploadedReport:
    """Location of an uploaded report"""
    key: str
    url: str


class ReportStorageStrategy(ABC):
    """
    Abstract base class for report storage strategies.
    
    Uploads are blocking calls: the export pipeline runs them in a worker
    thread while another thread writes the report into ``stream``.
    The stream may be of unknown length and is not seekable.
    """
    
    def __init__(self, public_url: str):
        self.public_url = public_url
    
    def upload(
        self,
        stream: BinaryIO,
        folder: str,
        file_name: str,
        content_type: str,
    ) -> UploadedReport:
        """
        Store everything readable from ``stream`` under a fresh key.
        
        Args:
            stream: Readable binary stream, consumed until EOF
            folder: Destination folder (see StorageFolder)
            file_name: Desired file name, sanitized into the key
            content_type: MIME type stored with the object
            
        Returns:
            UploadedReport with the storage key and its public URL
        """
        key = build_storage_key(folder, file_name)
        self._put(key, stream, content_type)
        logger.info("Uploaded report to %s", key)
        return UploadedReport(key=key, url=build_public_url(self.public_url, key))
    
    @abstractmethod
    def _put(self, key: str, stream: BinaryIO, content_type: str) -> None:
        """Persist the stream under ``key``. Errors must propagate."""
        pass


class S3ReportStorage(ReportStorageStrategy):
    """
    S3-compatible object storage.
    
    ``upload_fileobj`` sees a non-seekable stream, so s3transfer reads it
    part by part and performs a multipart upload without knowing the total
    size up front. At most ``max_concurrency`` parts are held in memory.
    """
    
    def __init__(
        self,
        client,
        bucket: str,
        public_url: str,
        multipart_chunksize: int = 8 * 1024 * 1024,
        max_concurrency: int = 4,
    ):
        """
        Args:
            client: boto3 S3 client
            bucket: Bucket name
            public_url: Public base URL of the bucket
            multipart_chunksize: Size of each uploaded part in bytes
            max_concurrency: Parts uploaded in parallel
        """
        super().__init__(public_url)
        self.client = client
        self.bucket = bucket
        self.transfer_config = TransferConfig(
            multipart_threshold=multipart_chunksize,
            multipart_chunksize=multipart_chunksize,
            max_concurrency=max_concurrency,
        )
    
    def _put(self, key: str, stream: BinaryIO, content_type: str) -> None:
        self.client.upload_fileobj(
            stream,
            self.bucket,
            key,
            ExtraArgs={"ContentType": content_type},
            Config=self.transfer_config,
        )


class LocalReportStorage(ReportStorageStrategy):
    """Writes reports below a local directory. Good for development."""
    
    def __init__(self, root: str, public_url: str):
        super().__init__(public_url)
        self.root = root
    
    def _put(self, key: str, stream: BinaryIO, content_type: str) -> None:
        path = os.path.join(self.root, *key.split("/"))
        os.makedirs(os.path.dirname(path), exist_ok=True)
        # Only a complete report ever appears under its key
        fd, partial_path = tempfile.mkstemp(dir=os.path.dirname(path), suffix=".part")
        try:
            with os.fdopen(fd, "wb") as target:
                shutil.copyfileobj(stream, target, READ_CHUNK_SIZE)
            os.replace(partial_path, path)
        except BaseException:
            os.remove(partial_path)
            raise


class InMemoryReportStorage(ReportStorageStrategy):
    """Keeps uploaded reports in a dict. Used by tests and demos."""
    
    def __init__(self, public_url: str = "https://storage.example.com/"):
        super().__init__(public_url)
        self.objects: Dict[str, bytes] = {}
        self.content_types: Dict[str, str] = {}
        self._lock = threading.Lock()
    
    def _put(self, key: str, stream: BinaryIO, content_type: str) -> None:
        chunks = []
        while True:
            chunk = stream.read(READ_CHUNK_SIZE)
            if not chunk:
                break
            chunks.append(chunk)
        with self._lock:
            self.objects[key] = b"".join(chunks)
            self.content_types[key] = content_type
    
    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            return self.objects.get(key)
