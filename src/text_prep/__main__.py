# -*- coding: utf-8 -*-
"""
Entry point to run the service via python -m text_prep.
"""
import uvicorn

from text_prep.config import settings


def main():
    """Start the Uvicorn server."""
    uvicorn.run(
        "text_prep.api:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=False,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
