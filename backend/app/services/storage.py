"""Local filesystem storage for uploaded images.

Storage layout:
    <media_root>/<events|icons|blogs|highlights>/<field>-<epoch ms>-<random><ext>

Files are served by the application under ``/uploads``.
"""

import logging
import mimetypes
import re
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import magic

from app.core.config import settings
from app.core.exceptions import ContentValidationError

logger = logging.getLogger(__name__)

UPLOAD_URL_PREFIX = "/uploads"

_SAFE_SUFFIX = re.compile(r"^\.[a-z0-9]{1,10}$")

# libmagic reports SVG as XML unless the file carries an <svg> root it recognises
_SVG_SNIFFED = {"image/svg+xml", "text/xml", "application/xml"}


@dataclass
class StoredImage:
    """Result of storing a single image on disk."""

    path: Path
    file_name: str
    url_path: str  # relative to the service root, e.g. /uploads/blogs/x.png
    size: int
    content_type: str


def _unique_name(field_name: str, original_name: Optional[str], content_type: str) -> str:
    suffix = Path(original_name or "").suffix.lower()
    if not _SAFE_SUFFIX.match(suffix):
        suffix = mimetypes.guess_extension(content_type) or ""
    stamp = int(time.time() * 1000)
    return f"{field_name}-{stamp}-{secrets.randbelow(10**9)}{suffix}"


class LocalImageStorage:
    """Saves validated image uploads below the media root."""

    def __init__(
        self,
        media_root: Optional[str] = None,
        max_size: Optional[int] = None,
        allowed_types: Optional[List[str]] = None,
    ):
        self.media_root = Path(media_root or settings.MEDIA_ROOT)
        self.max_size = max_size or settings.MAX_UPLOAD_SIZE
        self.allowed_types = allowed_types or settings.ALLOWED_IMAGE_TYPES

    def validate(self, content: bytes, content_type: Optional[str]) -> None:
        """
        Reject anything that is not an allowed, non-empty image within the size limit.

        Raises:
            ContentValidationError: With a message the uploader can act on
        """
        if (content_type or "").lower() not in self.allowed_types:
            raise ContentValidationError(
                f"Only image files are allowed (got '{content_type}')"
            )
        if not content:
            raise ContentValidationError("Uploaded file is empty")
        if len(content) > self.max_size:
            raise ContentValidationError(
                f"File too large: maximum size is {self.max_size // (1024 * 1024)}MB"
            )

        # Validate actual file type using magic bytes
        sniffed = magic.from_buffer(content[:2048], mime=True)
        is_svg = content_type.lower() == "image/svg+xml" and sniffed in _SVG_SNIFFED
        if sniffed not in self.allowed_types and not is_svg:
            raise ContentValidationError(
                f"File content does not match an allowed image type (detected '{sniffed}')"
            )

    def save(
        self,
        content: bytes,
        subdirectory: str,
        field_name: str,
        original_name: Optional[str],
        content_type: Optional[str],
    ) -> StoredImage:
        self.validate(content, content_type)

        target_dir = self.media_root / subdirectory
        target_dir.mkdir(parents=True, exist_ok=True)

        file_name = _unique_name(field_name, original_name, content_type.lower())
        path = target_dir / file_name
        with open(path, "wb") as f:
            f.write(content)
        return StoredImage(
            path=path,
            file_name=file_name,
            url_path=f"{UPLOAD_URL_PREFIX}/{subdirectory}/{file_name}",
            size=len(content),
            content_type=content_type,
        )
