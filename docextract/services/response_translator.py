import logging
import re
from enum import Enum

from fastapi import Request
from fastapi.responses import JSONResponse, PlainTextResponse

from ..errors import ExtractionError, UpstreamFetchError

logger = logging.getLogger(__name__)

EXPIRED_SIGNED_URL_ERROR = "Signed URL expired or invalid"
EXPIRED_SIGNED_URL_SUGGESTION = (
    "The document URL's access token was rejected by the upstream host. "
    "Generate a fresh signed URL and retry the request."
)

_EXPIRY_PATTERN = re.compile(r"exp.*(fail|expired)", re.IGNORECASE | re.DOTALL)


# ---------------------------------------------------------------------------
# Upstream classification
# ---------------------------------------------------------------------------

class UpstreamFailureKind(str, Enum):
    EXPIRED_SIGNED_URL = "expired_signed_url"
    UPSTREAM_ERROR = "upstream_error"


def is_expired_signed_url(status: int, body_preview: str) -> bool:
    """Storage hosts reject an expired signed-URL token with a 400 and a JWT error body."""
    if status != 400:
        return False
    preview = (body_preview or "").lower()
    return (
        "invalidjwt" in preview
        or '"exp"' in preview
        or _EXPIRY_PATTERN.search(preview) is not None
    )


def classify_upstream_failure(status: int, body_preview: str) -> UpstreamFailureKind:
    if is_expired_signed_url(status, body_preview):
        return UpstreamFailureKind.EXPIRED_SIGNED_URL
    return UpstreamFailureKind.UPSTREAM_ERROR


# ---------------------------------------------------------------------------
# Outcome -> HTTP
# ---------------------------------------------------------------------------

def _upstream_response(exc: UpstreamFetchError) -> JSONResponse:
    body = {
        "upstreamStatus": exc.upstream_status,
        "upstreamContentType": exc.upstream_content_type,
        "upstreamBodyPreview": exc.body_preview,
    }
    kind = classify_upstream_failure(exc.upstream_status, exc.body_preview)
    if kind is UpstreamFailureKind.EXPIRED_SIGNED_URL:
        body = {"error": EXPIRED_SIGNED_URL_ERROR, **body, "suggestion": EXPIRED_SIGNED_URL_SUGGESTION}
        return JSONResponse(status_code=401, content=body)

    body = {"error": exc.error, **body, "message": exc.message}
    return JSONResponse(status_code=exc.status_code, content=body)


def error_response(exc: ExtractionError) -> JSONResponse:
    if isinstance(exc, UpstreamFetchError):
        return _upstream_response(exc)
    return JSONResponse(status_code=exc.status_code, content=exc.body())


def text_response(text: str) -> PlainTextResponse:
    return PlainTextResponse(content=text, media_type="text/plain; charset=utf-8")


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def extraction_error_handler(request: Request, exc: ExtractionError) -> JSONResponse:
    response = error_response(exc)
    if response.status_code >= 500:
        logger.error(
            "%s %s -> %d: %s", request.method, request.url, response.status_code, exc,
            exc_info=exc,
        )
    else:
        logger.warning("%s %s -> %d: %s", request.method, request.url, response.status_code, exc)
    return response
