from typing import Any, Optional


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

class ExtractionError(Exception):
    """Any failure of an /extract request. Subclasses pick the HTTP status."""

    status_code = 500
    error = "Extraction failed"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    def body(self) -> dict[str, Any]:
        return {"error": self.error, "message": self.message}


# ---------------------------------------------------------------------------
# Request validation (400)
# ---------------------------------------------------------------------------

class ValidationError(ExtractionError):
    status_code = 400
    error = "Invalid request"


class MissingUrlError(ValidationError):
    error = "Missing URL parameter"

    def body(self) -> dict[str, Any]:
        return {"error": self.error}


class InvalidUrlError(ValidationError):
    error = "Invalid URL parameter"


# ---------------------------------------------------------------------------
# Document type (400)
# ---------------------------------------------------------------------------

class UnsupportedTypeError(ExtractionError):
    status_code = 400
    error = "Unsupported file type. Use .pdf or .docx"

    def __init__(self, filename: str, extension: str, content_type: str, final_url: str):
        super().__init__(f"Unsupported file type '{extension or '(none)'}' for '{filename}'")
        self.filename = filename
        self.extension = extension
        self.content_type = content_type
        self.final_url = final_url

    def body(self) -> dict[str, Any]:
        return {
            "error": self.error,
            "filename": self.filename,
            "detectedExtension": self.extension,
            "contentType": self.content_type,
            "finalUrl": self.final_url,
        }


# ---------------------------------------------------------------------------
# PDF engine readiness (503)
# ---------------------------------------------------------------------------

class EngineNotReadyError(ExtractionError):
    status_code = 503
    error = "PDF handler not ready"


# ---------------------------------------------------------------------------
# Upstream / network (401, 502, 500)
# ---------------------------------------------------------------------------

class UpstreamFetchError(ExtractionError):
    """The document host answered with an HTTP error status.

    The response status (401 vs 502) is decided by the response translator,
    which classifies the upstream status and body preview.
    """

    status_code = 502
    error = "Upstream fetch failed"

    def __init__(self, upstream_status: int, upstream_content_type: str, body_preview: str,
                 message: Optional[str] = None):
        super().__init__(message or f"Upstream responded with status {upstream_status}")
        self.upstream_status = upstream_status
        self.upstream_content_type = upstream_content_type
        self.body_preview = body_preview


class ServiceError(ExtractionError):
    """No HTTP response was received (timeout, DNS, refused, TLS, redirects)."""


class ExtractionEngineError(ExtractionError):
    """PyMuPDF or python-docx rejected the document."""
