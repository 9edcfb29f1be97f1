"""Resume file storage on the local filesystem."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Protocol
from uuid import uuid4

from fastapi import UploadFile

from app.core.config import get_settings
from app.shared.exceptions import ValidationException
from app.shared.utils import utc_now

logger = logging.getLogger(__name__)

ALLOWED_RESUME_EXTENSIONS = frozenset({".pdf", ".doc", ".docx"})


class ResumeStorage(Protocol):
    """Stores an uploaded resume and returns its file reference."""

    async def save(self, upload: UploadFile) -> str:
        """Persist upload and return the stored file name."""


class LocalResumeStorage:
    """Write resumes into a configured directory under generated names."""

    def __init__(self, directory: str | Path, max_bytes: int) -> None:
        self.directory = Path(directory)
        self.max_bytes = max_bytes

    def _build_file_name(self, original_name: str) -> str:
        suffix = Path(original_name).suffix.lower()
        if suffix not in ALLOWED_RESUME_EXTENSIONS:
            allowed = ", ".join(sorted(ALLOWED_RESUME_EXTENSIONS))
            raise ValidationException(f"Resume must be one of: {allowed}")
        stamp = int(utc_now().timestamp() * 1000)
        return f"{stamp}-{uuid4().hex[:8]}{suffix}"

    async def save(self, upload: UploadFile) -> str:
        file_name = self._build_file_name(upload.filename or "")
        content = await upload.read()
        if not content:
            raise ValidationException("Resume file is empty")
        if len(content) > self.max_bytes:
            raise ValidationException(f"Resume exceeds {self.max_bytes} bytes")

        self.directory.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread((self.directory / file_name).write_bytes, content)
        logger.info("Stored resume %s (%d bytes)", file_name, len(content))
        return file_name


def get_resume_storage() -> ResumeStorage:
    """Dependency provider for resume storage."""
    settings = get_settings()
    return LocalResumeStorage(settings.resume_upload_dir, settings.resume_max_bytes)
