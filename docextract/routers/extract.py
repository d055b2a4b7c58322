import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Query, Request
from fastapi.responses import PlainTextResponse
from pydantic import AnyHttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..errors import ExtractionError, InvalidUrlError, MissingUrlError
from ..models.extract import ErrorResponse, UnsupportedTypeResponse, UpstreamErrorResponse
from ..services.dispatcher import ExtractionDispatcher
from ..services.fetcher import DocumentFetcher
from ..services.response_translator import text_response

router = APIRouter(tags=["Extract"])
logger = logging.getLogger(__name__)

_url_adapter = TypeAdapter(AnyHttpUrl)


def _validate_url(url: Optional[str]) -> str:
    if not url:
        raise MissingUrlError()
    try:
        _url_adapter.validate_python(url)
    except PydanticValidationError as exc:
        raise InvalidUrlError(exc.errors()[0]["msg"]) from exc
    # pydantic drops tabs/newlines that httpx refuses; check the string we will send
    try:
        httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise InvalidUrlError(str(exc)) from exc
    return url


# ─────────────────────────────────────────────
# GET /extract?url=
# Validate → Fetch → Detect type → Extract → Plain text
# ─────────────────────────────────────────────

@router.get(
    "/extract",
    response_class=PlainTextResponse,
    responses={
        400: {"model": UnsupportedTypeResponse, "description": "Missing/invalid URL or unsupported type"},
        401: {"model": UpstreamErrorResponse, "description": "Signed URL expired or invalid"},
        500: {"model": ErrorResponse},
        502: {"model": UpstreamErrorResponse},
        503: {"model": ErrorResponse, "description": "PDF handler not ready"},
    },
)
async def extract_route(
    request: Request,
    url: Optional[str] = Query(None, description="Absolute URL of a PDF or DOCX document."),
) -> PlainTextResponse:
    url = _validate_url(url)

    fetcher: DocumentFetcher = request.app.state.fetcher
    dispatcher: ExtractionDispatcher = request.app.state.dispatcher

    try:
        source = await fetcher.fetch(url)
        text = await dispatcher.extract(source)
    except ExtractionError:
        raise
    except Exception as exc:
        raise ExtractionError(str(exc)) from exc

    return text_response(text)
