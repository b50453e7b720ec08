"""
Connection handler - echoes every frame back to the client that sent it.

One handler runs per accepted websocket. Receive failures count as a plain
disconnect, send failures end that connection only; nothing is re-raised.
"""
import enum
import itertools
import logging

from starlette.websockets import WebSocketDisconnect

logger = logging.getLogger(__name__)

# Only used to correlate log lines
_connection_ids = itertools.count(1)


class FrameKind(str, enum.Enum):
    TEXT = "text"
    BINARY = "bytes"


def read_frame(message):
    """Split a websocket.receive message into (kind, payload)"""
    if message.get("text") is not None:
        return FrameKind.TEXT, message["text"]
    if message.get("bytes") is not None:
        return FrameKind.BINARY, message["bytes"]
    raise ValueError(f"no payload in {message.get('type')!r} message")


def echo_message(kind, payload):
    return {"type": "websocket.send", kind.value: payload}


def payload_size(kind, payload):
    """Size on the wire in bytes"""
    if kind is FrameKind.TEXT:
        return len(payload.encode("utf-8"))
    return len(payload)


async def handle_connection(websocket) -> int:
    """Echo until the peer disconnects or the transport fails.

    Returns the number of messages echoed.
    """
    conn_id = next(_connection_ids)
    logger.info(f"New websocket connection #{conn_id} from {websocket.client}")

    echoed = 0
    while True:
        try:
            message = await websocket.receive()
        except (RuntimeError, OSError) as e:
            logger.info(f"Connection #{conn_id} receive failed, treating as disconnect: {e!r}")
            break

        if message["type"] == "websocket.disconnect":
            logger.info(f"Connection #{conn_id} closed by client (code {message.get('code')})")
            break

        try:
            kind, payload = read_frame(message)
        except ValueError as e:
            logger.warning(f"Connection #{conn_id} dropped: {e}")
            break

        logger.info(
            f"Received message on #{conn_id}",
            extra={"kind": kind.value, "size": payload_size(kind, payload)},
        )

        try:
            await websocket.send(echo_message(kind, payload))
        except (WebSocketDisconnect, RuntimeError, OSError) as e:
            logger.warning(f"Echo failed on connection #{conn_id}: {e!r}")
            break
        echoed += 1

    logger.info(f"Connection #{conn_id} finished after {echoed} message(s)")
    return echoed
