"""Run the VidScribe API server: ``python -m vidscribe``."""
from __future__ import annotations

import uvicorn

from vidscribe.infrastructure.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "vidscribe.adapters.inbound.fastapi_app:app",
        host=settings.web.host,
        port=settings.web.port,
        log_level=settings.logging.level.lower(),
    )


if __name__ == "__main__":
    main()
