import re
from typing import Optional
from urllib.parse import unquote, urlparse

SUPPORTED_EXTENSIONS = frozenset({"pdf", "docx"})

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_DOCX_CONTENT_TYPE_MARKERS = ("officedocument", "word", "msword", "application/vnd")


# ---------------------------------------------------------------------------
# URL -> filename -> extension
# ---------------------------------------------------------------------------

def filename_from_url(url: str) -> str:
    path = urlparse(url).path
    segment = path.rsplit("/", 1)[-1]
    segment = unquote(segment).replace("\r", "").replace("\n", "")
    return segment.strip()


def extension_from_filename(filename: str) -> str:
    if "." not in filename:
        return ""
    return _NON_ALNUM.sub("", filename.rsplit(".", 1)[-1].lower())


# ---------------------------------------------------------------------------
# Content-type fallback
# ---------------------------------------------------------------------------

def extension_from_content_type(content_type: Optional[str]) -> str:
    ct = (content_type or "").lower()
    if not ct:
        return ""
    if "pdf" in ct:
        return "pdf"
    if any(marker in ct for marker in _DOCX_CONTENT_TYPE_MARKERS):
        return "docx"
    return ""


# ---------------------------------------------------------------------------
# Public interface
# ---------------------------------------------------------------------------

def detect(url: str, content_type: Optional[str] = None) -> str:
    """Normalized extension for a document URL, or "" when undeterminable.

    The URL path wins; the content-type header is only consulted when the
    path has no extension. The response body is never sniffed.
    """
    extension = extension_from_filename(filename_from_url(url))
    if not extension and content_type:
        extension = extension_from_content_type(content_type)
    return extension


def is_supported(extension: str) -> bool:
    return extension in SUPPORTED_EXTENSIONS
