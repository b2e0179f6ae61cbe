"""GET /api/generate — render a stained glass PNG.

``/generate`` returns the export as ``image/png``. ``/generate/stream``
emits server-sent events: one ``progress`` per composited tile, then a
``result`` carrying the base64 PNG, then ``done``.
"""

from __future__ import annotations

import asyncio
import base64
import io
import json
import logging
import threading
import time
from collections.abc import AsyncGenerator

import numpy as np
from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response, StreamingResponse
from numpy.typing import NDArray
from PIL import Image

from cue.dependencies import get_render_settings
from cue.engine.config import RenderSettings
from cue.engine.context import SentimentVector, TileProgress
from cue.engine.errors import CueError
from cue.engine.pipeline import Generation, generate
from cue.models.responses import GenerateResult, TileProgressEvent

logger = logging.getLogger(__name__)

router = APIRouter()

_SENTINEL = object()  # marks end of queue


def encode_png(pixels: NDArray[np.uint8]) -> bytes:
    buf = io.BytesIO()
    Image.fromarray(np.ascontiguousarray(pixels)).save(buf, format="PNG")
    return buf.getvalue()


def _export_png(
    width: int,
    height: int,
    sentiment: SentimentVector,
    seed: int | None,
    render_settings: RenderSettings,
) -> tuple[Generation, bytes]:
    gen = generate(width, height, sentiment, seed=seed, settings=render_settings)
    return gen, encode_png(gen.export())


def _png_headers(gen: Generation) -> dict[str, str]:
    return {"Content-Disposition": f'inline; filename="cue-{gen.width}x{gen.height}.png"'}


@router.get("/generate")
async def generate_png(
    width: int = Query(1920),
    height: int = Query(1080),
    valence: float = Query(0.5),
    arousal: float = Query(0.5),
    focus: float = Query(0.5),
    seed: int | None = Query(None),
    render_settings: RenderSettings = Depends(get_render_settings),
) -> Response:
    sentiment = SentimentVector(valence, arousal, focus)
    loop = asyncio.get_running_loop()
    gen, png = await loop.run_in_executor(
        None, _export_png, width, height, sentiment, seed, render_settings
    )
    return Response(content=png, media_type="image/png", headers=_png_headers(gen))


async def _stream_generate(
    width: int,
    height: int,
    sentiment: SentimentVector,
    seed: int | None,
    render_settings: RenderSettings,
) -> AsyncGenerator[str, None]:
    """Drive generate() + export() in a thread, yielding SSE events as tiles complete."""
    start = time.perf_counter()
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()
    cancel = threading.Event()

    def _on_progress(progress: TileProgress) -> None:
        event = TileProgressEvent(
            index=progress.index,
            total=progress.total,
            x=progress.tile.x,
            y=progress.tile.y,
            width=progress.tile.width,
            height=progress.tile.height,
            fraction=progress.fraction,
        )
        loop.call_soon_threadsafe(queue.put_nowait, ("progress", event.model_dump()))

    def _run() -> None:
        """Sync render in thread — pushes (event, payload) pairs onto the async queue."""
        try:
            gen = generate(width, height, sentiment, seed=seed, settings=render_settings)
            png = encode_png(gen.export(on_progress=_on_progress, cancel_event=cancel))
            result = GenerateResult(
                width=gen.width,
                height=gen.height,
                regions=gen.region_count,
                processing_time_ms=round((time.perf_counter() - start) * 1000, 1),
                png_base64=base64.b64encode(png).decode("ascii"),
            )
            loop.call_soon_threadsafe(queue.put_nowait, ("result", result.model_dump()))
        except CueError as e:
            loop.call_soon_threadsafe(queue.put_nowait, ("error", {"type": "error", "message": str(e)}))
        except Exception as e:
            logger.exception("Streaming generation failed")
            loop.call_soon_threadsafe(queue.put_nowait, ("error", {"type": "error", "message": str(e)}))
        finally:
            loop.call_soon_threadsafe(queue.put_nowait, _SENTINEL)

    # Render in a thread so the event loop stays free to flush SSE
    loop.run_in_executor(None, _run)

    try:
        while True:
            item = await queue.get()
            if item is _SENTINEL:
                break
            event, payload = item
            yield f"event: {event}\ndata: {json.dumps(payload)}\n\n"
        yield f"event: done\ndata: {json.dumps({'type': 'done'})}\n\n"
    finally:
        # Client went away or stream finished; stop any remaining tiles
        cancel.set()


@router.get("/generate/stream")
async def generate_stream(
    width: int = Query(1920),
    height: int = Query(1080),
    valence: float = Query(0.5),
    arousal: float = Query(0.5),
    focus: float = Query(0.5),
    seed: int | None = Query(None),
    render_settings: RenderSettings = Depends(get_render_settings),
) -> StreamingResponse:
    return StreamingResponse(
        _stream_generate(width, height, SentimentVector(valence, arousal, focus), seed, render_settings),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
