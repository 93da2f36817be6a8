"""
FastAPI dependencies for dependency injection.

Report storage is a singleton built from settings; the link service is
created per request around the request's database session.
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from links_app.config import settings
from links_app.database.connection import get_db
from links_app.storage.factory import ReportStorageBackend, ReportStorageFactory
from links_app.storage.strategies import ReportStorageStrategy


@lru_cache()
def get_report_storage() -> ReportStorageStrategy:
    """
    Get report storage instance (singleton).
    
    Factory gets config from settings internally.
    @lru_cache ensures this is called only once.
    """
    backend = ReportStorageBackend(settings.storage_backend)
    return ReportStorageFactory.create(backend)


def get_link_service(
    db: Session = Depends(get_db),
    report_storage: ReportStorageStrategy = Depends(get_report_storage)
):
    """Get LinkService with all dependencies injected."""
    from links_app.services.link_service import LinkService
    return LinkService(db=db, report_storage=report_storage)
