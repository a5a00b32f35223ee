"""Object storage for reference documents.

``LocalObjectStorage`` keeps uploads on disk and issues HMAC-signed,
expiring download URLs. The pipeline only ever sees the URL string.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import logging
import re
import time
from pathlib import Path
from typing import Optional, Protocol
from urllib.parse import quote, urlencode

import aiofiles

from academic_writer.api.exceptions import (
    FileTooLargeError,
    InvalidFileTypeError,
    InvalidSignatureError,
    StoredFileNotFoundError,
    ValidationError,
)
from academic_writer.config import Settings
from academic_writer.models import (
    ALLOWED_EXTENSIONS,
    ALLOWED_MIME_TYPES,
    MAX_FILE_SIZE,
    SIGNED_URL_TTL_SECONDS,
    UploadedDocument,
)

logger = logging.getLogger(__name__)

DOWNLOAD_ROUTE = "/api/writing/files"

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class ObjectStorage(Protocol):
    """Minimal bucket interface used by the upload flow."""

    async def upload(self, key: str, data: bytes, content_type: str) -> None:
        ...

    def signed_download_url(self, key: str, ttl_seconds: int) -> str:
        ...


def safe_key_component(file_name: str) -> str:
    """Strip directories and unsafe characters from a client file name."""
    name = Path(file_name.replace("\\", "/")).name
    name = _UNSAFE_NAME_CHARS.sub("_", name).strip("._")
    return name or "document"


class LocalObjectStorage:
    """Filesystem-backed storage with signed download URLs."""

    def __init__(self, root: Path, signing_secret: str, base_url: str = ""):
        """Initialize the storage.

        Args:
            root: Directory holding stored objects.
            signing_secret: HMAC key for download URLs.
            base_url: Prefix for generated URLs (empty gives relative URLs).
        """
        self.root = root
        self._secret = signing_secret.encode("utf-8")
        self._base_url = base_url.rstrip("/")

    def _path_for(self, key: str) -> Path:
        if safe_key_component(key) != key:
            raise StoredFileNotFoundError(key)
        return self.root / key

    def _sign(self, key: str, expires: int) -> str:
        payload = f"{key}:{expires}".encode("utf-8")
        return hmac.new(self._secret, payload, hashlib.sha256).hexdigest()

    async def upload(self, key: str, data: bytes, content_type: str) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(self._path_for(key), "wb") as f:
            await f.write(data)
        logger.info(f"Stored {key} ({len(data)} bytes, {content_type})")

    def signed_download_url(self, key: str, ttl_seconds: int, now: Optional[float] = None) -> str:
        expires = int((now if now is not None else time.time()) + ttl_seconds)
        query = urlencode({"expires": expires, "signature": self._sign(key, expires)})
        return f"{self._base_url}{DOWNLOAD_ROUTE}/{quote(key)}?{query}"

    def verify(self, key: str, expires: int, signature: str, now: Optional[float] = None) -> None:
        """Check a download link.

        Raises:
            InvalidSignatureError: If the signature is wrong or the link expired.
        """
        expected = self._sign(key, expires)
        if not hmac.compare_digest(expected, signature):
            raise InvalidSignatureError(key, "signature mismatch")
        if (now if now is not None else time.time()) > expires:
            raise InvalidSignatureError(key, "link expired")

    async def read(self, key: str) -> bytes:
        path = self._path_for(key)
        if not path.is_file():
            raise StoredFileNotFoundError(key)
        async with aiofiles.open(path, "rb") as f:
            return await f.read()


def validate_reference_document(file_name: str, content_type: str, size: int) -> None:
    """Validate a reference document against size and type limits.

    Raises:
        FileTooLargeError: If the document exceeds MAX_FILE_SIZE.
        InvalidFileTypeError: If extension or MIME type is not allowed.
    """
    if size > MAX_FILE_SIZE:
        raise FileTooLargeError(size, MAX_FILE_SIZE)

    ext = Path(file_name).suffix.lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise InvalidFileTypeError(ext or file_name, sorted(ALLOWED_EXTENSIONS))

    if content_type not in ALLOWED_MIME_TYPES:
        raise InvalidFileTypeError(content_type, sorted(ALLOWED_MIME_TYPES))


async def upload_reference_document(
    storage: ObjectStorage,
    file_name: str,
    file_data: str,
    content_type: str,
    now_ms: Optional[int] = None,
) -> UploadedDocument:
    """Decode, validate, and store a base64 reference document.

    The stored key is ``<epoch-ms>-<file name>``.

    Raises:
        ValidationError: If ``file_data`` is not valid base64.
        FileTooLargeError / InvalidFileTypeError: See validate_reference_document.
    """
    try:
        content = base64.b64decode(file_data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError("fileData must be base64-encoded") from e

    validate_reference_document(file_name, content_type, len(content))

    timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
    key = f"{timestamp}-{safe_key_component(file_name)}"

    await storage.upload(key, content, content_type)
    url = storage.signed_download_url(key, SIGNED_URL_TTL_SECONDS)

    return UploadedDocument(file_url=url, file_name=key)


def build_storage(settings: Settings) -> LocalObjectStorage:
    return LocalObjectStorage(
        root=settings.uploads_dir,
        signing_secret=settings.storage_signing_secret,
        base_url=settings.public_base_url,
    )
