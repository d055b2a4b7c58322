import asyncio
import importlib
import logging
from enum import Enum
from types import ModuleType
from typing import Any, Awaitable, Callable, Optional

from ..errors import EngineNotReadyError

logger = logging.getLogger(__name__)

Loader = Callable[[], Awaitable[Any]]


class EngineState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


def _load_pymupdf() -> ModuleType:
    pymupdf = importlib.import_module("pymupdf")
    # Opening an empty document proves the native library is usable.
    pymupdf.open().close()
    return pymupdf


async def load_pymupdf() -> ModuleType:
    return await asyncio.to_thread(_load_pymupdf)


class PdfEngine:
    """Process-wide handle on the PDF library.

    Initialization is single-flight: whoever finds the engine uninitialized
    (or failed) starts one task, and every caller arriving while it runs
    awaits that same task. The outcome is only ever read through `state`.
    """

    def __init__(self, loader: Optional[Loader] = None):
        self._loader = loader or load_pymupdf
        self._task: Optional[asyncio.Task] = None
        self._handle: Any = None
        self._error: Optional[BaseException] = None
        self.state = EngineState.UNINITIALIZED

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    def start(self) -> asyncio.Task:
        """Begin initialization unless it is running or done. Must run on the event loop."""
        if self._task is not None and self.state in (EngineState.INITIALIZING, EngineState.READY):
            return self._task

        self.state = EngineState.INITIALIZING
        self._error = None
        self._task = asyncio.create_task(self._initialize(), name="pdf-engine-init")
        self._task.add_done_callback(self._on_done)
        return self._task

    async def _initialize(self) -> Any:
        logger.info("Initializing PDF engine...")
        return await self._loader()

    def _on_done(self, task: asyncio.Task) -> None:
        if task is not self._task:
            return
        if task.cancelled():
            self.state = EngineState.FAILED
            self._error = asyncio.CancelledError("PDF engine initialization was cancelled")
            logger.warning("PDF engine initialization cancelled.")
            return

        exc = task.exception()
        if exc is not None:
            self.state = EngineState.FAILED
            self._error = exc
            logger.error("PDF engine initialization failed: %s", exc, exc_info=exc)
            return

        self._handle = task.result()
        self.state = EngineState.READY
        logger.info("PDF engine ready.")

    async def acquire(self, timeout: float) -> Any:
        """Return the engine, waiting at most `timeout` seconds for initialization."""
        if self.state is EngineState.READY:
            return self._handle

        task = self.start()
        try:
            # shield: a caller timing out must not cancel the shared task
            return await asyncio.wait_for(asyncio.shield(task), timeout)
        except asyncio.TimeoutError as exc:
            raise EngineNotReadyError(
                f"PDF engine did not become ready within {timeout:g}s"
            ) from exc
        except asyncio.CancelledError:
            if task.cancelled():
                raise EngineNotReadyError("PDF engine initialization was cancelled")
            raise
        except Exception as exc:
            raise EngineNotReadyError(f"PDF engine initialization failed: {exc}") from exc

    async def close(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
            await asyncio.gather(self._task, return_exceptions=True)
