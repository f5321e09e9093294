#!/usr/bin/env python
"""
Serve the rotation scheduling API.

Host, port, reload and log level come from ROTATION_* settings. Searches
run in FastAPI's worker threadpool, so a single uvicorn worker still
serves concurrent schedule requests.
"""

import uvicorn

from rotation_api.config import settings


def main() -> None:
    uvicorn.run(
        "rotation_api.main:app",
        host=settings.host,
        port=settings.port,
        # Reload only while developing the service itself
        reload=settings.debug and settings.environment == "development",
        reload_dirs=["./src"],
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
