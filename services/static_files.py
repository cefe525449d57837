"""
Static file resolution for the local development server.
Maps a request path beneath a root directory to a 200, 403 or 404 result.
"""
import os
import stat
from dataclasses import dataclass
from typing import Optional
from urllib.parse import unquote

import anyio

from config import Config
from utils.logger import static_logger


@dataclass
class StaticFileResult:
    """Terminal outcome of a static file request."""
    status: int
    body: bytes
    content_type: str


class StaticFileService:
    """Resolves and reads files beneath a fixed root directory."""

    MIME_TYPES = {
        '.html': 'text/html',
        '.js': 'application/javascript',
        '.css': 'text/css',
        '.json': 'application/json',
        '.png': 'image/png',
        '.jpg': 'image/jpeg',
        '.jpeg': 'image/jpeg',
        '.gif': 'image/gif',
        '.svg': 'image/svg+xml',
        '.ico': 'image/x-icon'
    }
    DEFAULT_CONTENT_TYPE = 'application/octet-stream'

    NOT_FOUND = StaticFileResult(404, b"404 Not Found", "text/plain")
    FORBIDDEN = StaticFileResult(403, b"403 Forbidden", "text/plain")

    def __init__(self, root: Optional[str] = None, index_document: Optional[str] = None,
                 strict_containment: Optional[bool] = None):
        """
        Initialize the service.

        Args:
            root: Directory to serve (defaults to Config.STATIC_ROOT)
            index_document: File served for directory requests
            strict_containment: Use a canonical realpath check instead of the string-prefix check
        """
        self.root = os.path.abspath(str(root or Config.STATIC_ROOT))
        self.index_document = index_document or Config.STATIC_INDEX
        self.strict_containment = Config.STATIC_STRICT_CONTAINMENT if strict_containment is None else strict_containment

    @classmethod
    def content_type_for(cls, file_path: str) -> str:
        """Content type from the file extension, case-insensitive."""
        extension = os.path.splitext(file_path)[1].lower()
        return cls.MIME_TYPES.get(extension, cls.DEFAULT_CONTENT_TYPE)

    def resolve_path(self, request_path: str) -> Optional[str]:
        """
        Turn a raw request path into a filesystem path beneath the root.

        Returns:
            The joined, normalized path, or None when the path can't be decoded
        """
        path = request_path.split("?", 1)[0]
        if path in ("", "/"):
            path = "/" + self.index_document

        try:
            decoded = unquote(path, errors="strict")
        except UnicodeDecodeError:
            return None

        if "\x00" in decoded:
            return None

        # A leading slash must not make the joined path absolute
        return os.path.normpath(os.path.join(self.root, decoded.lstrip("/")))

    def is_within_root(self, file_path: str) -> bool:
        """Traversal guard for a resolved path."""
        if self.strict_containment:
            real_root = os.path.realpath(self.root)
            return os.path.commonpath([real_root, os.path.realpath(file_path)]) == real_root

        return file_path.startswith(self.root)

    async def _read(self, file_path: str) -> StaticFileResult:
        """Read a whole file into memory; any read error is a 404."""
        try:
            data = await anyio.Path(file_path).read_bytes()
        except OSError as e:
            static_logger.debug(f"Read failed for {file_path}: {e}")
            return self.NOT_FOUND

        return StaticFileResult(200, data, self.content_type_for(file_path))

    async def handle(self, request_path: str) -> StaticFileResult:
        """
        Serve a request path.

        Args:
            request_path: Raw (still percent-encoded) URL path, query string allowed

        Returns:
            StaticFileResult with status 200, 403 or 404
        """
        file_path = self.resolve_path(request_path)
        if file_path is None:
            return self.NOT_FOUND

        if not self.is_within_root(file_path):
            static_logger.warning(f"Blocked path traversal attempt: {request_path}")
            return self.FORBIDDEN

        try:
            stats = await anyio.Path(file_path).stat()
        except OSError:
            index_path = os.path.join(file_path, self.index_document)
            try:
                index_stats = await anyio.Path(index_path).stat()
            except OSError:
                return self.NOT_FOUND

            if not stat.S_ISREG(index_stats.st_mode):
                return self.NOT_FOUND
            return await self._read(index_path)

        if stat.S_ISDIR(stats.st_mode):
            return await self._read(os.path.join(file_path, self.index_document))

        return await self._read(file_path)
