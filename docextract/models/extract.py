from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ResolvedSource(BaseModel):
    raw_bytes: bytes = Field(repr=False)
    filename: str
    extension: str
    content_type: str
    final_url: str


# ---------------------------------------------------------------------------
# Response bodies (documentation only; errors build their own dicts)
# ---------------------------------------------------------------------------

class ErrorResponse(BaseModel):
    error: str
    message: Optional[str] = None


class UnsupportedTypeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    error: str
    filename: str
    detected_extension: str = Field(alias="detectedExtension")
    content_type: str = Field(alias="contentType")
    final_url: str = Field(alias="finalUrl")


class UpstreamErrorResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    error: str
    upstream_status: int = Field(alias="upstreamStatus")
    upstream_content_type: str = Field(alias="upstreamContentType")
    upstream_body_preview: str = Field(alias="upstreamBodyPreview")
    message: Optional[str] = None
    suggestion: Optional[str] = Field(
        default=None,
        description="Present when the upstream rejected an expired or invalid signed URL.",
    )


class VersionInfo(BaseModel):
    name: str
    build: str
    features: list[str]
