"""
Factory for creating report storage instances.
Simple, clean factory with singleton caching.
"""

import logging
from enum import Enum

from .strategies import (
    ReportStorageStrategy,
    S3ReportStorage,
    LocalReportStorage,
    InMemoryReportStorage,
)
from links_app.config import settings

logger = logging.getLogger(__name__)


class ReportStorageBackend(Enum):
    """Available report storage backends"""
    S3 = "s3"
    LOCAL = "local"
    MEMORY = "memory"


class ReportStorageFactory:
    """
    Simple factory for creating report storage instances.
    
    Gets configuration from settings (not passed as parameters).
    """
    
    _instance: ReportStorageStrategy = None  # Single cached instance
    
    @classmethod
    def create(cls, backend: ReportStorageBackend) -> ReportStorageStrategy:
        """
        Create or return cached report storage instance.
        
        Args:
            backend: Type of storage backend (from enum)
            
        Returns:
            Singleton report storage instance
        """
        # Return cached instance if exists
        if cls._instance is not None:
            return cls._instance
        
        # Create new instance based on backend type
        if backend == ReportStorageBackend.S3:
            import boto3
            
            client = boto3.client(
                "s3",
                endpoint_url=settings.storage_endpoint_url,
                aws_access_key_id=settings.storage_access_key_id,
                aws_secret_access_key=settings.storage_secret_access_key,
                region_name=settings.storage_region,
            )
            cls._instance = S3ReportStorage(
                client=client,
                bucket=settings.storage_bucket,
                public_url=settings.storage_public_url,
                multipart_chunksize=settings.storage_multipart_chunksize,
                max_concurrency=settings.storage_max_concurrency,
            )
            logger.info("✅ S3 report storage initialized (bucket=%s)", settings.storage_bucket)
            
        elif backend == ReportStorageBackend.LOCAL:
            cls._instance = LocalReportStorage(
                root=settings.storage_local_path,
                public_url=settings.storage_public_url,
            )
            logger.info("✅ Local report storage initialized (%s)", settings.storage_local_path)
            
        elif backend == ReportStorageBackend.MEMORY:
            cls._instance = InMemoryReportStorage(public_url=settings.storage_public_url)
            logger.info("✅ In-memory report storage initialized")
            
        else:
            raise ValueError(f"Unknown storage backend: {backend}")
        
        return cls._instance
    
    @classmethod
    def clear_instance(cls):
        """Clear cached instance (for testing)"""
        cls._instance = None
