import json
import logging
from typing import Any, Optional

import httpx

from ..config import Settings
from ..errors import ServiceError, UpstreamFetchError
from ..models.extract import ResolvedSource
from . import type_detector

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; docextract/1.0)"


def body_preview(body: Any, limit: int = 200) -> str:
    """First `limit` characters of an upstream body, whatever its type."""
    if body is None:
        return ""
    if isinstance(body, (bytes, bytearray)):
        return bytes(body[: limit * 4]).decode("utf-8", errors="replace")[:limit]
    if isinstance(body, str):
        return body[:limit]
    try:
        return json.dumps(body)[:limit]
    except (TypeError, ValueError):
        return str(body)[:limit]


class DocumentFetcher:
    """Downloads a document and resolves its filename, extension and content type."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._settings = settings
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            follow_redirects=True,
            max_redirects=self._settings.max_redirects,
            timeout=self._settings.fetch_timeout_seconds,
            headers={"User-Agent": USER_AGENT},
            transport=self._transport,
        )

    async def fetch(self, url: str) -> ResolvedSource:
        try:
            async with self._client() as client:
                response = await client.get(url)
        except httpx.RequestError as exc:
            logger.error("Fetch of %s failed without a response: %r", url, exc)
            raise ServiceError(str(exc) or exc.__class__.__name__) from exc

        content_type = response.headers.get("content-type", "")

        if response.is_error:
            preview = body_preview(response.content, self._settings.body_preview_chars)
            logger.warning(
                "Upstream %s answered %s (%s): %r",
                url, response.status_code, content_type, preview,
            )
            raise UpstreamFetchError(response.status_code, content_type, preview)

        final_url = str(response.url) if response.url else url
        filename = type_detector.filename_from_url(url)
        final_filename = type_detector.filename_from_url(final_url)
        extension = type_detector.extension_from_filename(filename)
        if not filename:
            filename = final_filename
        if not extension:
            extension = type_detector.detect(final_url, content_type)

        logger.info(
            "Fetched %s -> %s (%d bytes, content-type=%r, extension=%r)",
            url, final_url, len(response.content), content_type, extension,
        )
        return ResolvedSource(
            raw_bytes=response.content,
            filename=filename,
            extension=extension,
            content_type=content_type,
            final_url=final_url,
        )
