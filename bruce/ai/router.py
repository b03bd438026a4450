"""
Real-time question/answer channel.

Frames are JSON objects ``{"event": "question", "data": "<text>"}``; a plain
text frame, or a bare JSON string, is treated as a question. Every question
is answered with ``{"event": "response", "data": "<answer>"}`` from its own
task, so answers can arrive in any order. A disconnect does not cancel
questions already in flight; their answers are dropped.
"""
import asyncio
import json
import logging
from typing import Any, Optional, Set

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from bruce.ai.service import CompletionRelay
from bruce.deps import ContextDep
from bruce.utils.request_id import REQUEST_ID_HEADER, bind_request_id, request_id_var

logger = logging.getLogger(__name__)

router = APIRouter()

# question event -> response event
EVENTS = {
    "question": "response",
    "ai-question": "ai-response",
}


def parse_frame(text: str) -> tuple[Optional[str], Any]:
    """Return ``(event, data)`` for one client frame."""
    try:
        message = json.loads(text)
    except ValueError:
        return "question", text
    if isinstance(message, str):
        return "question", message
    if not isinstance(message, dict):
        return "question", text
    return message.get("event"), message.get("data")


class RelayConnection:
    def __init__(self, websocket: WebSocket, relay: CompletionRelay):
        self.websocket = websocket
        self.relay = relay
        self.send_lock = asyncio.Lock()
        self.tasks: Set[asyncio.Task] = set()

    def submit(self, event: str, prompt: Any) -> None:
        task = asyncio.create_task(self.answer(EVENTS[event], prompt))
        self.tasks.add(task)
        task.add_done_callback(self.tasks.discard)

    async def answer(self, reply_event: str, prompt: Any) -> None:
        text = await self.relay.answer(prompt if isinstance(prompt, str) else str(prompt))
        if self.websocket.client_state != WebSocketState.CONNECTED:
            logger.debug("Dropping answer, websocket already closed")
            return
        try:
            async with self.send_lock:
                await self.websocket.send_json({"event": reply_event, "data": text})
        except (WebSocketDisconnect, RuntimeError) as e:
            logger.debug(f"Dropping answer for closed websocket: {e!r}")


@router.websocket("/ws")
async def relay_endpoint(websocket: WebSocket, context: ContextDep):
    request_id, token = bind_request_id(websocket.headers)
    try:
        await websocket.accept(
            headers=[(REQUEST_ID_HEADER.lower().encode(), request_id.encode())]
        )
        await relay_loop(websocket, RelayConnection(websocket, context.relay))
    finally:
        request_id_var.reset(token)


async def relay_loop(websocket: WebSocket, connection: RelayConnection) -> None:
    logger.info("Relay websocket connected")
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000), message.get("reason"))
            text = message.get("text")
            if text is None:
                logger.warning("Ignoring binary websocket frame")
                continue
            event, data = parse_frame(text)
            if event not in EVENTS:
                logger.warning(f"Ignoring unknown websocket event: {event}")
                continue
            connection.submit(event, data)
    except WebSocketDisconnect:
        logger.info(f"Relay websocket disconnected, {len(connection.tasks)} answers in flight")
