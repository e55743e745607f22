"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stickerlab.config import settings

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.stickerlab_log_level.upper(), logging.DEBUG),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="StickerLab",
        description="Foreground isolation — subject cut-outs, traced outlines, thumbnails",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Import all stage modules so @stage decorators fire
    from stickerlab.engine.pipeline import load_stages

    load_stages()

    from stickerlab.api.router import api_router

    app.include_router(api_router)

    return app


app = create_app()
