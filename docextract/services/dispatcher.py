import asyncio
import io
import logging
from types import ModuleType

import mammoth

from ..config import Settings
from ..errors import ExtractionEngineError, UnsupportedTypeError
from ..models.extract import ResolvedSource
from . import type_detector
from .pdf_engine import PdfEngine

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# PDF
# ---------------------------------------------------------------------------

def _page_text_runs(page) -> list[str]:
    runs: list[str] = []
    for block in page.get_text("dict")["blocks"]:
        # image blocks have type 1 and no lines
        for line in block.get("lines", []):
            runs.extend(span["text"] for span in line["spans"])
    return runs


def _pdf_to_text(pymupdf: ModuleType, raw_bytes: bytes) -> tuple[str, int]:
    parts: list[str] = []
    with pymupdf.open(stream=raw_bytes, filetype="pdf") as doc:
        for page in doc:
            parts.append(" ".join(_page_text_runs(page)) + "\n")
        page_count = doc.page_count
    return "".join(parts), page_count


# ---------------------------------------------------------------------------
# DOCX
# ---------------------------------------------------------------------------

def _docx_to_text(raw_bytes: bytes) -> str:
    result = mammoth.extract_raw_text(io.BytesIO(raw_bytes))
    for message in result.messages:
        logger.debug("mammoth: %s", message)
    return result.value


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------

class ExtractionDispatcher:
    def __init__(self, pdf_engine: PdfEngine, settings: Settings):
        self._pdf_engine = pdf_engine
        self._settings = settings

    async def extract(self, source: ResolvedSource) -> str:
        if not type_detector.is_supported(source.extension):
            raise UnsupportedTypeError(
                filename=source.filename,
                extension=source.extension,
                content_type=source.content_type,
                final_url=source.final_url,
            )

        extractors = {
            "pdf":  self._extract_pdf,
            "docx": self._extract_docx,
        }
        return await extractors[source.extension](source)

    async def _extract_pdf(self, source: ResolvedSource) -> str:
        pymupdf = await self._pdf_engine.acquire(self._settings.pdf_ready_timeout_seconds)
        try:
            text, page_count = await asyncio.to_thread(_pdf_to_text, pymupdf, source.raw_bytes)
        except Exception as exc:
            raise ExtractionEngineError(f"Could not read PDF: {exc}") from exc

        logger.info("Extracted %d pages (%d chars) from %s", page_count, len(text), source.filename)
        return text

    async def _extract_docx(self, source: ResolvedSource) -> str:
        try:
            text = await asyncio.to_thread(_docx_to_text, source.raw_bytes)
        except Exception as exc:
            raise ExtractionEngineError(f"Could not read DOCX: {exc}") from exc

        logger.info("Extracted %d chars from %s", len(text), source.filename)
        return text
