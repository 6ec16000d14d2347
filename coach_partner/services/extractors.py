# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
File text extraction.

Attachment bytes live in object storage owned by the platform service;
the platform also owns the parsers. This module only asks for text and
always returns some, falling back to a bracketed placeholder.
"""

import logging
from typing import Optional, Protocol

import httpx

from coach_partner.config import settings

logger = logging.getLogger(__name__)


class TextExtractor(Protocol):
    """Best-effort plain text for a stored file. Never raises."""

    async def extract(self, object_path: str, mime_type: str, filename: str) -> str: ...


def unreadable_placeholder(filename: str) -> str:
    return f"[Unable to read file: {filename}]"


def local_placeholder(mime_type: str, filename: str) -> Optional[str]:
    """Placeholder for formats that never carry extractable text.

    Returns:
        Optional[str]: The placeholder, or ``None`` if the platform should
            be asked.
    """
    if mime_type.startswith("image/"):
        return (
            f"[Image file: {filename} - Content cannot be extracted as text. "
            "For image analysis, consider using vision-capable AI models.]"
        )
    return None


class PlatformTextExtractor:
    """Asks the platform service to fetch and parse a stored file."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (base_url or settings.PLATFORM_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.FILE_EXTRACT_TIMEOUT

    async def extract(self, object_path: str, mime_type: str, filename: str) -> str:
        """Extract text from a stored object.

        Args:
            object_path (str): Object storage reference.
            mime_type (str): MIME type of the object.
            filename (str): Original filename, used in placeholders.

        Returns:
            str: Extracted text, or a placeholder on any failure.
        """
        placeholder = local_placeholder(mime_type, filename)
        if placeholder is not None:
            return placeholder

        payload = {"object_path": object_path, "mime_type": mime_type, "filename": filename}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(f"{self.base_url}/api/v1/files/extract/", json=payload)
                if resp.status_code == 200:
                    return resp.json().get("text") or unreadable_placeholder(filename)
                logger.warning("Text extraction for %s returned %s", filename, resp.status_code)
        except Exception as e:
            logger.warning("Failed to extract text from %s: %s", filename, e)
        return unreadable_placeholder(filename)
