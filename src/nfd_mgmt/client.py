"""Management connection: JSON request/reply and notifications over NATS."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Awaitable

import nats
from nats.aio.client import Client

from nfd_mgmt.errors import MalformedMessageError

logger = logging.getLogger(__name__)

# Seconds to wait for the forwarder to answer a management request
DEFAULT_REQUEST_TIMEOUT = 4.0


def decode_message(subject: str, data: bytes) -> dict[str, Any]:
    """Decode a management payload. An empty payload is an empty object.

    Raises MalformedMessageError unless data is a UTF-8 JSON object.
    """
    if not data:
        return {}
    try:
        payload = json.loads(data.decode())
    except ValueError as e:
        raise MalformedMessageError(subject, str(e)) from e
    if not isinstance(payload, dict):
        raise MalformedMessageError(subject, f"expected a JSON object, got {type(payload).__name__}")
    return payload


class ManagementConnection:
    """NATS link to the forwarder's management endpoint."""

    def __init__(
        self,
        url: str = "nats://localhost:4222",
        name: str | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self._url = url
        self._name = name
        self._timeout = timeout
        self._nc: Client | None = None

    @property
    def nc(self) -> Client:
        if self._nc is None or self._nc.is_closed:
            raise RuntimeError("Management connection not established. Call connect() first.")
        return self._nc

    async def connect(self) -> None:
        """Connect to the management endpoint, reconnecting forever if the link drops."""

        async def error_cb(e: Exception) -> None:
            logger.error("Management link error: %s", e)

        async def disconnected_cb() -> None:
            logger.warning("Management link lost, face notifications paused")

        async def reconnected_cb() -> None:
            logger.info("Management link restored via %s", self._nc.connected_url if self._nc else "unknown")

        self._nc = await nats.connect(
            self._url,
            name=self._name,
            error_cb=error_cb,
            disconnected_cb=disconnected_cb,
            reconnected_cb=reconnected_cb,
            max_reconnect_attempts=-1,
            reconnect_time_wait=2,
        )
        logger.info("Connected to forwarder management at %s", self._url)

    async def close(self) -> None:
        if self._nc and not self._nc.is_closed:
            await self._nc.drain()
            logger.info("Management connection closed")

    async def request(self, subject: str, data: dict[str, Any] | None = None) -> dict[str, Any]:
        """Send a management request and return the decoded reply.

        Raises MalformedMessageError when the reply is not a JSON object;
        nats errors (timeout, no responders) propagate unchanged.
        """
        payload = json.dumps(data or {}).encode()
        msg = await self.nc.request(subject, payload, timeout=self._timeout)
        return decode_message(subject, msg.data)

    async def subscribe(
        self,
        subject: str,
        handler: Callable[[dict[str, Any]], Awaitable[None]],
    ) -> nats.aio.subscription.Subscription:
        """Deliver each decoded notification on subject to handler.

        Undecodable notifications are dropped; handler errors are logged.
        """

        async def _cb(msg: nats.aio.msg.Msg) -> None:
            try:
                data = decode_message(subject, msg.data)
            except MalformedMessageError as e:
                logger.warning("Dropping notification: %s", e)
                return
            try:
                await handler(data)
            except Exception:
                logger.exception("Error handling notification on %s", subject)

        sub = await self.nc.subscribe(subject, cb=_cb)
        logger.debug("Subscribed to %s", subject)
        return sub
