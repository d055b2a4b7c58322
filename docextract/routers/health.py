from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from ..models.extract import VersionInfo

router = APIRouter(tags=["Health"])

FEATURES = [
    "pdf",
    "docx",
    "content-type-fallback",
    "signed-url-error-classification",
]


@router.get("/", response_class=PlainTextResponse)
def root() -> str:
    return "PDF/DOCX Extractor is running!"


@router.get("/_version", response_model=VersionInfo)
def version(request: Request) -> VersionInfo:
    return VersionInfo(name="docextract", build=request.app.state.settings.build, features=FEATURES)
