"""Validation, upload and download of agent JSON files.

Agent configurations live in a private storage bucket under
``<prefix>/<epoch-ms>_<original name>``. The bucket is created on the
first upload if it does not exist yet.
"""

import json
import time
from collections.abc import Callable
from pathlib import PurePosixPath
from urllib.parse import quote

import structlog

from agentmart.backend import BackendClient
from agentmart.config import settings
from agentmart.exceptions import (
    AgentDownloadError,
    BackendError,
    BackendPermissionError,
    FileTooLargeError,
    InvalidFileTypeError,
    InvalidJsonContentError,
)
from agentmart.models.result import FileCheck, Result, UploadResult

logger = structlog.get_logger()

JSON_CONTENT_TYPE = "application/json"
DEFAULT_DOWNLOAD_NAME = "agent-config.json"
PERMISSION_DENIED_MESSAGE = "Permission denied. Please check your authentication status."


def is_json_file(filename: str | None, content_type: str | None) -> bool:
    """Check the name or declared type marks the file as JSON."""
    return bool(content_type and "json" in content_type.lower()) or bool(
        filename and filename.lower().endswith(".json")
    )


def validate_json_file(
    filename: str | None,
    content_type: str | None,
    content: bytes,
    max_bytes: int | None = None,
) -> FileCheck:
    """Validate type, then size, then content of an uploaded file."""
    limit = max_bytes if max_bytes is not None else settings.MAX_AGENT_FILE_BYTES

    if not is_json_file(filename, content_type):
        return Result.failure(str(InvalidFileTypeError()))

    if len(content) > limit:
        return Result.failure(str(FileTooLargeError(limit)))

    try:
        json.loads(content.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return Result.failure(str(InvalidJsonContentError()))

    return Result.success()


def download_filename(path: str | None) -> str:
    """Name offered to the browser for a stored file."""
    if not path or path.endswith("/"):
        return DEFAULT_DOWNLOAD_NAME
    return PurePosixPath(path).name or DEFAULT_DOWNLOAD_NAME


def content_disposition(filename: str) -> str:
    """Attachment header value that survives non-ASCII and quoted names."""
    fallback = "".join(
        c if c.isascii() and c.isprintable() and c not in '"\\' else "_" for c in filename
    )
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


class AgentFileStore:
    """Storage operations for agent JSON files."""

    def __init__(
        self,
        client: BackendClient,
        bucket: str | None = None,
        prefix: str | None = None,
        max_bytes: int | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._client = client
        self.bucket = bucket or settings.AGENT_FILES_BUCKET
        self.prefix = (prefix if prefix is not None else settings.AGENT_FILES_PREFIX).strip("/")
        self.max_bytes = max_bytes if max_bytes is not None else settings.MAX_AGENT_FILE_BYTES
        self._clock = clock

    def build_key(self, filename: str) -> str:
        """Build a collision-resistant key from the current time and the file name."""
        name = PurePosixPath(filename).name or DEFAULT_DOWNLOAD_NAME
        key = f"{int(self._clock() * 1000)}_{name}"
        return f"{self.prefix}/{key}" if self.prefix else key

    async def ensure_bucket_exists(self) -> None:
        """Create the bucket privately if it is missing.

        Raises:
            BackendError: If listing or creating the bucket fails.
        """
        buckets = await self._client.storage.list_buckets()
        if any(b.get("name") == self.bucket or b.get("id") == self.bucket for b in buckets):
            return
        try:
            await self._client.storage.create_bucket(self.bucket, public=False)
        except BackendError as e:
            raise BackendError(
                f"Could not create '{self.bucket}' bucket: {e.message}",
                status_code=e.status_code,
                code=e.code,
            ) from e

    async def upload_json_file(
        self,
        filename: str,
        content_type: str | None,
        content: bytes,
    ) -> UploadResult:
        """Validate and store an agent file.

        Returns:
            Success with the stored key, or failure with a readable reason.
        """
        check = validate_json_file(filename, content_type, content, self.max_bytes)
        if not check.ok:
            return Result.failure(check.error or "Invalid file")

        key = self.build_key(filename)
        try:
            await self.ensure_bucket_exists()
            await self._client.storage.upload(
                self.bucket,
                key,
                content,
                content_type=JSON_CONTENT_TYPE,
                upsert=True,
            )
        except BackendPermissionError as e:
            logger.warning("Agent file upload denied", bucket=self.bucket, error=e.message)
            return Result.failure(PERMISSION_DENIED_MESSAGE)
        except BackendError as e:
            logger.warning("Agent file upload failed", bucket=self.bucket, error=e.message)
            return Result.failure(e.message)

        logger.info("Uploaded agent file", bucket=self.bucket, key=key, size=len(content))
        return Result.success(key)

    async def download_json_file(self, path: str) -> bytes:
        """Fetch a stored agent file.

        Raises:
            AgentDownloadError: If storage cannot return the object.
        """
        try:
            return await self._client.storage.download(self.bucket, path)
        except BackendError as e:
            logger.warning("Agent file download failed", path=path, error=e.message)
            raise AgentDownloadError(e.message) from e

    async def remove_json_file(self, path: str) -> None:
        await self._client.storage.remove(self.bucket, [path])
