"""
Local file storage for uploaded images and payment proofs.

Files live under ``MEDIA_DIR/<bucket>/<path>`` and are served by the
``/static`` mount, so the public URL is ``MEDIA_URL/<bucket>/<path>``.
"""
import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from rcc_portal.core.config import MEDIA_DIR, MEDIA_URL

logger = logging.getLogger(__name__)


class StorageError(Exception):
    pass


@dataclass(frozen=True)
class StoredFile:
    bucket: str
    path: str
    url: str


class FileStorage:
    def __init__(self, base_path: str = MEDIA_DIR, base_url: str = MEDIA_URL):
        self.base_path = Path(base_path).resolve()
        self.base_url = base_url.rstrip("/")
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _safe_path(self, bucket: str, path: str) -> Path:
        target = (self.base_path / bucket / path).resolve()
        if not target.is_relative_to(self.base_path / bucket):
            raise StorageError(f"Path traversal attempt detected: {bucket}/{path}")
        return target

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.base_url}/{bucket}/{path}"

    def save(self, bucket: str, owner: str, extension: str, data: bytes) -> StoredFile:
        """Store bytes as ``{owner}/{uuid}.{ext}`` and return its public URL."""
        path = f"{owner}/{uuid.uuid4()}.{extension}"
        target = self._safe_path(bucket, path)
        target.parent.mkdir(parents=True, exist_ok=True)
        if target.exists():
            raise StorageError(f"File already exists: {bucket}/{path}")
        target.write_bytes(data)
        logger.info("Stored %s/%s (%d bytes)", bucket, path, len(data))
        return StoredFile(bucket=bucket, path=path, url=self.public_url(bucket, path))

    def read(self, bucket: str, path: str) -> bytes:
        target = self._safe_path(bucket, path)
        if not target.exists():
            raise FileNotFoundError(f"File not found: {bucket}/{path}")
        return target.read_bytes()

    def path_from_url(self, bucket: str, url: Optional[str]) -> Optional[str]:
        prefix = f"{self.base_url}/{bucket}/"
        if not url or not url.startswith(prefix):
            return None
        return url[len(prefix):]

    def delete_by_url(self, bucket: str, url: Optional[str]) -> bool:
        path = self.path_from_url(bucket, url)
        if path is None:
            return False
        target = self._safe_path(bucket, path)
        if not target.exists():
            return False
        target.unlink()
        logger.info("Deleted %s/%s", bucket, path)
        return True


_storage: Optional[FileStorage] = None


def get_storage() -> FileStorage:
    global _storage
    if _storage is None:
        _storage = FileStorage()
    return _storage
