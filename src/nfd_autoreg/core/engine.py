"""Reconciliation engine — face dataset snapshot plus live face notifications."""

from __future__ import annotations

import asyncio
import logging
import signal
from enum import Enum
from typing import Any

from nfd_mgmt.errors import DatasetFetchError
from nfd_mgmt.models import FaceDescriptor, FaceEventKind, FaceEventNotification, FaceScope

from ..config import FilterConfig
from .classifier import classify
from .issuer import CommandIssuer
from .management import ManagementClient

logger = logging.getLogger(__name__)


class EngineState(str, Enum):
    IDLE = "idle"
    SNAPSHOT_FETCHING = "snapshot-fetching"
    SUBSCRIBED = "subscribed"
    SHUTTING_DOWN = "shutting-down"
    STOPPED = "stopped"


async def _cancel(task: asyncio.Task | None) -> None:
    if task is None or task.done():
        return
    task.cancel()
    await asyncio.gather(task, return_exceptions=True)


class ReconciliationEngine:
    """Registers prefixes on faces that exist at startup and on every face created afterwards.

    The dataset snapshot and the live notification stream feed the same
    classify-and-dispatch path. Notifications are queued and processed one
    at a time in arrival order. While the snapshot is outstanding, handled
    face ids are remembered so a face seen both in the snapshot and live is
    registered only once.
    """

    def __init__(
        self,
        client: ManagementClient,
        config: FilterConfig,
        issuer: CommandIssuer | None = None,
    ) -> None:
        self._client = client
        self._config = config
        self._issuer = issuer or CommandIssuer(client)
        self._state = EngineState.IDLE
        self._events: asyncio.Queue[FaceEventNotification] = asyncio.Queue()
        self._stop_requested = asyncio.Event()
        self._subscription: Any = None
        self._snapshot_task: asyncio.Task | None = None
        self._pump_task: asyncio.Task | None = None
        self._snapshot_pending = False
        self._handled: set[int] = set()

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def issuer(self) -> CommandIssuer:
        return self._issuer

    @property
    def is_active(self) -> bool:
        return self._state in (EngineState.SNAPSHOT_FETCHING, EngineState.SUBSCRIBED)

    async def start(self) -> None:
        """Request the face dataset and subscribe to face notifications.

        Raises whatever the subscription raises (SubscriptionError); the
        engine is then stopped.
        """
        if self._state != EngineState.IDLE:
            raise RuntimeError(f"Engine cannot start from state {self._state.value}")

        self._state = EngineState.SNAPSHOT_FETCHING
        self._snapshot_pending = True
        self._snapshot_task = asyncio.create_task(self._fetch_snapshot())

        try:
            self._subscription = await self._client.subscribe_face_events(self._on_notification)
        except Exception:
            logger.error("Cannot subscribe to face notifications")
            await _cancel(self._snapshot_task)
            self._state = EngineState.STOPPED
            raise

        self._pump_task = asyncio.create_task(self._pump())
        self._state = EngineState.SUBSCRIBED
        logger.info("Subscribed to face notifications")

    async def run(self) -> None:
        """Start, then process events until SIGINT/SIGTERM or request_stop()."""
        await self.start()

        loop = asyncio.get_running_loop()
        signals = (signal.SIGINT, signal.SIGTERM)
        for sig in signals:
            loop.add_signal_handler(sig, self.request_stop)

        try:
            await self._stop_requested.wait()
        finally:
            for sig in signals:
                loop.remove_signal_handler(sig)
            await self.stop()

    def request_stop(self) -> None:
        self._stop_requested.set()

    async def stop(self) -> None:
        """Stop consuming events. In-flight commands are cancelled, not drained."""
        if self._state in (EngineState.SHUTTING_DOWN, EngineState.STOPPED):
            return
        self._state = EngineState.SHUTTING_DOWN
        logger.info("Shutting down")

        if self._subscription is not None:
            try:
                await self._subscription.unsubscribe()
            except Exception:
                logger.exception("Error unsubscribing from face notifications")
            self._subscription = None

        await _cancel(self._pump_task)
        await _cancel(self._snapshot_task)
        await self._issuer.aclose()
        self._state = EngineState.STOPPED

    async def join(self) -> None:
        """Wait until the snapshot is processed and every queued notification is handled."""
        if self._snapshot_task is not None:
            await asyncio.gather(self._snapshot_task, return_exceptions=True)
        if self._pump_task is not None and not self._pump_task.done():
            await self._events.join()

    async def _fetch_snapshot(self) -> None:
        try:
            faces = await self._client.fetch_faces()
        except DatasetFetchError as e:
            logger.warning("Face dataset unavailable, continuing without it: %s", e)
            faces = []
        except Exception:
            logger.exception("Unexpected error fetching face dataset, continuing without it")
            faces = []

        try:
            if self.is_active:
                logger.info("Processing %d faces from dataset", len(faces))
                for face in faces:
                    self.reconcile(face)
        finally:
            self._snapshot_pending = False

    async def _on_notification(self, notification: FaceEventNotification) -> None:
        if not self.is_active:
            return
        self._events.put_nowait(notification)

    async def _pump(self) -> None:
        while True:
            notification = await self._events.get()
            try:
                self.process_notification(notification)
            except Exception:
                logger.exception("Error processing %s", notification)
            finally:
                self._events.task_done()

    def process_notification(self, notification: FaceEventNotification) -> None:
        if notification.kind == FaceEventKind.CREATED and notification.face_scope != FaceScope.LOCAL:
            logger.info("PROCESSING: %s", notification)
            self.reconcile(notification)
        else:
            logger.info("IGNORED: %s", notification)

    def reconcile(self, face: FaceDescriptor) -> None:
        """Classify face and dispatch its registrations, at most once per face id during startup."""
        if face.face_id in self._handled:
            logger.debug("Face %d already handled", face.face_id)
            return
        if self._snapshot_pending:
            self._handled.add(face.face_id)
        self._issuer.dispatch(classify(face, self._config))
