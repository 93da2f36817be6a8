import logging
from typing import List, Optional
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy import update
from sqlalchemy.orm import Session

from links_app.export.exporter import LinkExporter
from links_app.models.link import Link
from links_app.schemas.link import ExportResponse, LinkCreate, LinkResponse
from links_app.services.errors import (
    InvalidIdError,
    InvalidLinkError,
    LinkError,
    LinkNotFoundError,
)
from links_app.shared.either import Either, make_left, make_right
from links_app.storage.strategies import ReportStorageStrategy

logger = logging.getLogger(__name__)


class LinkService:
    """
    Link service with dependency injection for report storage.
    
    Expected failures (bad input, unknown link) are returned as ``Left``
    values. Database and storage errors are raised and handled by the
    HTTP layer.
    """
    
    def __init__(
        self,
        db: Session,
        report_storage: Optional[ReportStorageStrategy] = None
    ):
        """
        Initialize link service with dependencies.
        
        Args:
            db: Database session
            report_storage: Storage for exported reports (needed by export_links)
        """
        self.db = db
        self.report_storage = report_storage

    async def create_link(self, url: str, short_url: str) -> Either[InvalidLinkError, Link]:
        """Validate and insert a new link. Nothing is written when validation fails."""
        try:
            data = LinkCreate(url=url, short_url=short_url)
        except ValidationError as exc:
            logger.info("Rejected link %r -> %r: %s", short_url, url, exc)
            return make_left(InvalidLinkError(_describe(exc)))
        
        link = Link(url=data.url, short_url=data.short_url)
        self.db.add(link)
        self.db.commit()
        self.db.refresh(link)
        
        logger.info("Link created: %s -> %s", link.short_url, link.url)
        return make_right(link)

    async def get_links(self) -> Either[InvalidLinkError, List[Link]]:
        """All links, newest first."""
        links = (
            self.db.query(Link)
            .order_by(Link.created_at.desc(), Link.id.desc())
            .all()
        )
        return make_right(links)

    async def get_link_by_short_url(self, short_url: str) -> Either[LinkNotFoundError, Link]:
        """
        Resolve an alias and count the access.
        
        The increment is a single ``access_count = access_count + 1``
        UPDATE, so concurrent resolutions are never lost.
        If several links share the alias, the newest one wins.
        """
        if not short_url:
            return make_left(LinkNotFoundError())
        
        link = (
            self.db.query(Link)
            .filter(Link.short_url == short_url)
            .order_by(Link.created_at.desc(), Link.id.desc())
            .first()
        )
        if not link:
            return make_left(LinkNotFoundError())
        
        self.db.execute(
            update(Link)
            .where(Link.id == link.id)
            .values(access_count=Link.access_count + 1)
        )
        self.db.commit()
        self.db.refresh(link)
        return make_right(link)

    async def delete_link(self, link_id) -> Either[LinkError, LinkResponse]:
        """Delete a link by id and return its values from before the deletion."""
        try:
            parsed_id = UUID(str(link_id))
        except ValueError:
            return make_left(InvalidIdError())
        if parsed_id.version != 7:
            return make_left(InvalidIdError("id must be a UUIDv7"))
        link_id = str(parsed_id)
        
        link = self.db.get(Link, link_id)
        if not link:
            return make_left(LinkNotFoundError())
        
        snapshot = LinkResponse.model_validate(link)
        self.db.delete(link)
        self.db.commit()
        
        logger.info("Link deleted: %s", link_id)
        return make_right(snapshot)

    async def export_links(self) -> Either[None, ExportResponse]:
        """Stream every link into a CSV report and upload it."""
        if self.report_storage is None:
            raise RuntimeError("LinkService was created without report storage")
        
        exporter = LinkExporter(engine=self.db.get_bind(), storage=self.report_storage)
        report = await exporter.export()
        return make_right(ExportResponse(report_url=report.url))


def _describe(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
