# src/trono/api/app.py
"""
FastAPI application wiring.

The map frontend is served from a different origin than the API, so browsers
need CORS headers; origins are listed explicitly in `TRONO_CORS_ORIGINS`
(comma-separated). Without it no CORS middleware is installed.
"""

from __future__ import annotations

import os

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from trono.core.logging import configure_logging

from .routes import router


def cors_origins() -> list[str]:
    raw = os.getenv("TRONO_CORS_ORIGINS", "")
    return [s.strip() for s in raw.split(",") if s.strip()]


def create_app() -> FastAPI:
    configure_logging()
    api = FastAPI(title="Trono API", version="0.1.0")

    origins = cors_origins()
    if origins:
        # Read-only JSON API: no cookies, and only the verbs the routes use.
        api.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["GET", "POST"],
            allow_headers=["Content-Type"],
        )

    api.include_router(router)
    return api


app = create_app()
