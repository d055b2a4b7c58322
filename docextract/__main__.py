import logging

import uvicorn

from .config import settings

logger = logging.getLogger("docextract")


def main() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    logger.info("Server running on port %d", settings.port)
    try:
        uvicorn.run("docextract.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    except SystemExit as exc:
        # uvicorn exits non-zero when it cannot bind
        if exc.code:
            logger.error("Server failed to start on %s:%d (is PORT already in use?)", settings.host, settings.port)
        raise


if __name__ == "__main__":
    main()
