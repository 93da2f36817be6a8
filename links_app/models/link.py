from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime
from uuid6 import uuid7

from links_app.database.connection import Base

URL_MAX_LENGTH = 100
SHORT_URL_MAX_LENGTH = 20


def generate_link_id() -> str:
    """Time-ordered UUIDv7, so ids sort roughly by insertion time."""
    return str(uuid7())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Link(Base):
    """
    A shortened link.
    
    access_count is only ever changed by resolving the alias, and only
    through an atomic ``access_count + 1`` update.
    Note: short_url is not unique-enforced.
    """
    __tablename__ = "links"

    id = Column(String(36), primary_key=True, default=generate_link_id)
    url = Column(String(URL_MAX_LENGTH), nullable=False)
    short_url = Column(String(SHORT_URL_MAX_LENGTH), nullable=False, index=True)
    access_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, index=True)
