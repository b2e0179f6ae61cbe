"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cue.config import settings
from cue.engine.errors import SurfaceAllocationError

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.cue_log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)

logger = logging.getLogger(__name__)


async def _surface_allocation_handler(request: Request, exc: SurfaceAllocationError) -> JSONResponse:
    logger.error("%s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=507,
        content={"detail": str(exc), "width": exc.width, "height": exc.height},
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title="Cue",
        description="Procedural stained glass image synthesis",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(SurfaceAllocationError, _surface_allocation_handler)

    from cue.api.router import api_router

    app.include_router(api_router)

    return app


app = create_app()
