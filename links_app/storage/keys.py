"""
Storage key helpers.

Keys look like ``reports/<uuid4>-<sanitized-name>.csv``. Uniqueness comes
from the random token, not from the file name.
"""

import os
import re
from enum import Enum
from typing import Optional
from urllib.parse import urljoin
from uuid import uuid4

_DISALLOWED_CHARACTERS = re.compile(r"[^a-z0-9]")


class StorageFolder(str, Enum):
    """Folders reports may be stored under"""
    REPORTS = "reports"


def sanitize_file_name(file_name: str) -> str:
    """
    Strip everything but lowercase letters and digits from the base name.
    
    The extension is kept as-is:
    ``links-2024-01-01T10:00:00.000Z.csv`` -> ``links20240101100000000.csv``
    """
    base, extension = os.path.splitext(os.path.basename(file_name))
    return f"{_DISALLOWED_CHARACTERS.sub('', base)}{extension}"


def build_storage_key(folder: str, file_name: str, token: Optional[str] = None) -> str:
    folder = StorageFolder(folder).value
    token = token or str(uuid4())
    return f"{folder}/{token}-{sanitize_file_name(file_name)}"


def build_public_url(base_url: str, key: str) -> str:
    """Join the public base URL of the bucket with an object key."""
    if not base_url.endswith("/"):
        base_url = f"{base_url}/"
    return urljoin(base_url, key)
