"""Application entry point."""

import uvicorn

from climavue_api.core.config import settings


def main():
    """Run the uvicorn server."""
    uvicorn.run(
        "climavue_api.app:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=False,
        workers=1,  # Single worker: the dashboard session and store live in process
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
