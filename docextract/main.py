import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI

from .config import VERSION, Settings, settings as default_settings
from .errors import ExtractionError
from .routers.extract import router as extract_router
from .routers.health import router as health_router
from .services.dispatcher import ExtractionDispatcher
from .services.fetcher import DocumentFetcher
from .services.pdf_engine import Loader, PdfEngine
from .services.response_translator import extraction_error_handler

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    pdf_loader: Optional[Loader] = None,
) -> FastAPI:
    settings = settings or default_settings
    pdf_engine = PdfEngine(loader=pdf_loader)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Warm up in the background; requests never wait on startup.
        logger.info("Starting PDF engine warm-up.")
        pdf_engine.start()
        yield
        await pdf_engine.close()

    app = FastAPI(title="PDF/DOCX Extractor", version=VERSION, lifespan=lifespan)

    app.state.settings = settings
    app.state.pdf_engine = pdf_engine
    app.state.fetcher = DocumentFetcher(settings, transport=transport)
    app.state.dispatcher = ExtractionDispatcher(pdf_engine, settings)

    app.add_exception_handler(ExtractionError, extraction_error_handler)

    app.include_router(health_router)
    app.include_router(extract_router)

    return app


app = create_app()
