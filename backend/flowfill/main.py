"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from flowfill.config import APP_VERSION, settings
from flowfill.generators.catalog import create_default_registry

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.flowfill_log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="FlowFill",
        description="Curve-tube placement engine — distribute generated shapes along vector paths",
        version=APP_VERSION,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # One registry per app; tests build their own.
    app.state.registry = create_default_registry()

    from flowfill.api.router import api_router

    app.include_router(api_router)

    return app


app = create_app()
