"""Upload service storing images in the Firebase bucket."""

import re
from dataclasses import dataclass

import structlog

from app.core.clock import Clock, epoch_millis, utc_now
from app.core.exceptions import UploadException
from app.core.storage import ObjectStorage, public_url

logger = structlog.get_logger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


@dataclass(frozen=True)
class UploadResult:
    """Public location of a stored upload."""

    url: str
    file_name: str


def sanitize_filename(name: str) -> str:
    """Replace every character outside ``[A-Za-z0-9.-]`` with ``_``."""
    return _UNSAFE_CHARS.sub("_", name)


class UploadService:
    """Service for image uploads."""

    def __init__(self, storage: ObjectStorage, default_path: str = "uploads", clock: Clock = utc_now):
        """Initialize service with object storage and key prefix."""
        self.storage = storage
        self.default_path = default_path
        self.clock = clock

    def build_key(self, original_name: str, path: str | None = None) -> str:
        """Storage key ``{path}/{millis}_{sanitized name}``."""
        prefix = path or self.default_path
        return f"{prefix}/{epoch_millis(self.clock())}_{sanitize_filename(original_name)}"

    async def upload_image(
        self,
        data: bytes | None,
        original_name: str | None,
        content_type: str | None,
        path: str | None = None,
    ) -> UploadResult:
        """
        Validate and store an image, returning its public URL.

        The declared content type is trusted; bytes are not inspected.

        Raises:
            UploadException: If no file was given or it is not an image
        """
        if data is None:
            raise UploadException("No file provided")

        if not content_type or not content_type.startswith("image/"):
            raise UploadException("Only image files are allowed")

        key = self.build_key(original_name or "file", path)
        await self.storage.save(key, data, content_type=content_type)
        await self.storage.make_public(key)

        logger.info("file_uploaded", key=key, content_type=content_type, size=len(data))

        return UploadResult(url=public_url(self.storage.bucket_name, key), file_name=key)
