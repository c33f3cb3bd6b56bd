"""HTTP and WebSocket front end for TempClip.

The routes are thin: they validate the request body, hand the work to the
``ClipStore`` and translate its results into JSON responses. ``/ws`` turns
notifier events into pushes for a viewer holding a clip page open.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

import anyio
from fastapi import FastAPI, Request, WebSocket
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.websockets import WebSocketDisconnect
from ulid import ULID

from tempclip.config import TempClipConfig
from tempclip.database import ClipStore
from tempclip.errors import ClipValidationError
from tempclip.models import ClipEvent
from tempclip.schema import ClipCreated, ClipView, CreateClipRequest, Message, StorageStats
from tempclip.services import EvictionService
from tempclip.utils.expiry import resolve_expiry

logger = logging.getLogger(__name__)

WS_POLICY_VIOLATION = 1008

EVENT_TYPES = {
    "revoked": "clip_revoked",
    "expired": "clip_expired",
}


def _message(status_code: int, message: str) -> JSONResponse:
    body = Message(success=status_code < 400, message=message)
    return JSONResponse(body.model_dump(), status_code=status_code)


def _event_payload(event: ClipEvent) -> Dict[str, Any]:
    return {
        "type": EVENT_TYPES[event.event.value],
        "clipId": event.id,
        "timestamp": event.timestamp.isoformat(),
    }


def create_app(
    config: Optional[TempClipConfig] = None,
    store: Optional[ClipStore] = None,
) -> FastAPI:
    config = config or TempClipConfig()
    if store is None:
        store = ClipStore.from_config(config)
    eviction = None if config.lazy_cleanup else EvictionService(
        store, interval=config.cleanup_interval)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if eviction is not None:
            eviction.start()
        try:
            yield
        finally:
            if eviction is not None:
                eviction.stop()

    app = FastAPI(title="TempClip", lifespan=lifespan)
    app.state.config = config
    app.state.store = store
    app.state.eviction = eviction

    @app.exception_handler(Exception)
    async def internal_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _message(500, "Internal server error")

    @app.get("/")
    def root():
        return "running"

    @app.post("/api/clips")
    async def create_clip(request: Request):
        try:
            payload = await request.json()
            body = CreateClipRequest.model_validate(payload)
            expires_at = resolve_expiry(
                store.now(), body.expiryDuration, body.customExpiry)
            clip_id, clip = store.create(body.content, expires_at)
        except ValidationError as e:
            return _message(400, str(e))
        except ClipValidationError as e:
            return _message(400, str(e))
        except ValueError:
            return _message(400, "Invalid request")

        created = ClipCreated(id=clip_id, expiresAt=clip.expires_at)
        return JSONResponse(created.model_dump(mode="json"))

    @app.get("/api/clips/{clip_id}")
    def get_clip(clip_id: str):
        clip = store.get(clip_id)
        if clip is None:
            return _message(404, "Clip not found or expired")
        return JSONResponse(ClipView.from_clip(clip).model_dump(mode="json"))

    @app.delete("/api/clips/{clip_id}")
    def revoke_clip(clip_id: str):
        if not store.revoke(clip_id):
            return _message(404, "Clip not found")
        return _message(200, "Clip revoked successfully")

    @app.post("/api/cleanup")
    def cleanup():
        return {"success": True, "deletedCount": store.cleanup()}

    @app.get("/api/debug")
    def debug():
        stats = StorageStats.from_stats(store.stats())
        return {
            "success": True,
            "timestamp": store.now().isoformat(),
            "storage": stats.model_dump(),
        }

    @app.websocket("/ws")
    async def clip_events(websocket: WebSocket):
        await websocket.accept()

        clip_id = websocket.query_params.get("clipId")
        if not clip_id:
            logger.info("WebSocket connection rejected: missing clipId")
            await websocket.close(code=WS_POLICY_VIOLATION, reason="Missing clipId")
            return

        connection_id = f"c_{ULID()}"
        loop = asyncio.get_running_loop()
        events: "asyncio.Queue[ClipEvent]" = asyncio.Queue()

        # callbacks may fire on the eviction thread
        subscription = store.subscribe(
            clip_id, lambda event: loop.call_soon_threadsafe(events.put_nowait, event))
        logger.info("WebSocket client connected (%s)", connection_id)

        try:
            await websocket.send_json({
                "type": "connection_established",
                "clipId": clip_id,
                "connectionId": connection_id,
                "timestamp": store.now().isoformat(),
            })

            if not subscription.active:
                await websocket.send_json({
                    "type": "clip_not_found",
                    "clipId": clip_id,
                    "timestamp": store.now().isoformat(),
                })
                await websocket.close()
                return

            event = await _wait_for_event(websocket, events)
            if event is not None:
                await websocket.send_json(_event_payload(event))
                await websocket.close()
        except WebSocketDisconnect:
            pass
        finally:
            store.notifier.unsubscribe(subscription)
            logger.info("WebSocket client disconnected (%s)", connection_id)

    return app


async def _wait_for_event(
    websocket: WebSocket, events: "asyncio.Queue[ClipEvent]"
) -> Optional[ClipEvent]:
    """Wait for the terminal event, or return None if the client goes away.

    Both waits run in one task group; whichever finishes first cancels the
    other. Cancellation from outside reaches the caller unchanged.
    """

    received: List[ClipEvent] = []

    async with anyio.create_task_group() as group:

        async def drain() -> None:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
            group.cancel_scope.cancel()

        async def wait() -> None:
            received.append(await events.get())
            group.cancel_scope.cancel()

        group.start_soon(drain)
        group.start_soon(wait)

    return received[0] if received else None
