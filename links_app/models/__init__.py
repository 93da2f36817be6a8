"""
Database models for the links service.

Reports produced by the export pipeline live in object storage,
not in SQLAlchemy models.
"""

from .link import Link

__all__ = ["Link"]
