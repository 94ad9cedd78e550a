"""Change notifier: best-effort push of write events to connected clients."""

import logging
from collections.abc import Callable

from fastapi import BackgroundTasks, Depends, Request, WebSocket

logger = logging.getLogger(__name__)

SCHEDULE_CREATED = "schedule:created"
SCHEDULE_UPDATED = "schedule:updated"
SCHEDULE_DELETED = "schedule:deleted"
STAFF_CREATED = "staff:created"
STAFF_DELETED = "staff:deleted"


class ChangeNotifier:
    """Keeps the connected WebSocket clients and fans events out to them.

    Delivery is at-most-once and unordered across clients. A client whose
    send fails is dropped; ``broadcast`` itself never raises.
    """

    def __init__(self) -> None:
        self._clients: set[WebSocket] = set()

    @property
    def client_count(self) -> int:
        return len(self._clients)

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self._clients.add(websocket)
        logger.info("Push client connected (%d total)", len(self._clients))

    def disconnect(self, websocket: WebSocket) -> None:
        self._clients.discard(websocket)
        logger.info("Push client disconnected (%d total)", len(self._clients))

    async def broadcast(self, event: str, data: dict) -> None:
        message = {"event": event, "data": data}
        for websocket in list(self._clients):
            try:
                await websocket.send_json(message)
            except Exception:
                logger.warning("Dropping push client after failed send of %s", event, exc_info=True)
                self._clients.discard(websocket)


def get_notifier(request: Request) -> ChangeNotifier:
    """Dependency: the application's notifier."""
    return request.app.state.notifier


Publisher = Callable[[str, dict], None]


def get_publisher(
    background_tasks: BackgroundTasks,
    notifier: ChangeNotifier = Depends(get_notifier),
) -> Publisher:
    """Dependency: schedules broadcasts to run after the response is sent."""

    def publish(event: str, data: dict) -> None:
        background_tasks.add_task(notifier.broadcast, event, data)

    return publish


def publish_safely(publish: Publisher, event: str, data: dict) -> None:
    """Hand an event to the publisher; a failure here never fails the write."""
    try:
        publish(event, data)
    except Exception:
        logger.exception("Failed to publish %s %s", event, data)
