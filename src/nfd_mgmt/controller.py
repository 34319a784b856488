"""Forwarder management controller: control commands, face dataset, face notifications."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Awaitable

from nats.errors import Error as NatsError, NoRespondersError
from pydantic import ValidationError

from nfd_mgmt.client import DEFAULT_REQUEST_TIMEOUT, ManagementConnection
from nfd_mgmt.errors import (
    ERROR_NACK,
    ERROR_SERVER,
    ERROR_TIMEOUT,
    CommandRejected,
    DatasetFetchError,
    MalformedMessageError,
    SubscriptionError,
)
from nfd_mgmt.models import (
    ControlParameters,
    ControlResponse,
    FaceDataset,
    FaceDescriptor,
    FaceEventNotification,
)
from nfd_mgmt.subjects import Subjects

logger = logging.getLogger(__name__)


class NfdController:
    """Talks to the forwarder's management endpoint over NATS."""

    def __init__(
        self,
        nats_url: str = "nats://localhost:4222",
        name: str = "nfd-autoreg",
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self._conn = ManagementConnection(url=nats_url, name=name, timeout=timeout)

    async def connect(self) -> None:
        await self._conn.connect()

    async def close(self) -> None:
        await self._conn.close()

    async def issue_command(self, command: str, parameters: ControlParameters) -> ControlResponse:
        """Send a control command and return the forwarder's successful response.

        Raises CommandRejected when the forwarder answers with a non-200 code
        or when no answer could be obtained.
        """
        subject = Subjects.command(command)
        try:
            data = await self._conn.request(subject, parameters.model_dump(mode="json", exclude_none=True))
            response = ControlResponse.model_validate(data)
        except NoRespondersError as e:
            raise CommandRejected(ERROR_NACK, "No responders") from e
        except (asyncio.TimeoutError, TimeoutError) as e:
            raise CommandRejected(ERROR_TIMEOUT, "Timeout") from e
        except (MalformedMessageError, ValidationError) as e:
            raise CommandRejected(ERROR_SERVER, "Malformed control response") from e
        except (NatsError, RuntimeError) as e:
            raise CommandRejected(ERROR_SERVER, str(e) or type(e).__name__) from e

        if not response.ok:
            raise CommandRejected(response.code, response.text)
        return response

    async def fetch_faces(self) -> list[FaceDescriptor]:
        """Fetch the face status dataset."""
        try:
            data = await self._conn.request(Subjects.FACES_LIST)
            dataset = FaceDataset.model_validate(data)
        except (
            NatsError,
            asyncio.TimeoutError,
            TimeoutError,
            RuntimeError,
            MalformedMessageError,
            ValidationError,
        ) as e:
            raise DatasetFetchError(f"Cannot fetch face dataset: {e}") from e
        logger.debug("Fetched %d faces", len(dataset.faces))
        return dataset.faces

    async def subscribe_face_events(
        self,
        handler: Callable[[FaceEventNotification], Awaitable[None]],
    ) -> Any:
        """Subscribe to face event notifications.

        Notifications that do not validate are logged and dropped.
        """

        async def _on_message(data: dict[str, Any]) -> None:
            try:
                notification = FaceEventNotification.model_validate(data)
            except ValidationError as e:
                logger.warning("Dropping malformed face notification: %s", e)
                return
            await handler(notification)

        try:
            return await self._conn.subscribe(Subjects.FACE_EVENTS, _on_message)
        except (NatsError, RuntimeError) as e:
            raise SubscriptionError(f"Cannot subscribe to face events: {e}") from e
