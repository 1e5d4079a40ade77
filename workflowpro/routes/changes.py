import asyncio
import contextlib

import structlog
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from workflowpro.services.change_feed import change_hub

router = APIRouter(tags=["changes"])
logger = structlog.get_logger(__name__)


@router.websocket("/ws/changes")
async def change_stream(websocket: WebSocket):
    """Push every committed row change to the client, unfiltered.

    Incoming frames are read only to notice the client going away.
    """
    # Subscribe before the handshake so no commit after it is missed
    queue = change_hub.subscribe()
    sender = None
    try:
        await websocket.accept()
        logger.info("change_subscriber_connected", subscribers=change_hub.subscriber_count)

        async def forward():
            while True:
                message = await queue.get()
                await websocket.send_json(message)

        sender = asyncio.create_task(forward())
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info("change_subscriber_disconnected")
    finally:
        if sender is not None:
            sender.cancel()
            with contextlib.suppress(asyncio.CancelledError, Exception):
                await sender
        change_hub.unsubscribe(queue)
