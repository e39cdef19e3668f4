# -*- coding: utf-8 -*-
"""FastAPI application exposing gallery status and switching."""

from fastapi import FastAPI

from .. import __version__
from ..constant import DOCS_ENABLED
from .routers import router


def create_app() -> FastAPI:
    app = FastAPI(
        title="galleryswitch",
        version=__version__,
        docs_url="/docs" if DOCS_ENABLED else None,
        redoc_url="/redoc" if DOCS_ENABLED else None,
        openapi_url="/openapi.json" if DOCS_ENABLED else None,
    )
    app.include_router(router, prefix="/api")
    return app


app = create_app()
