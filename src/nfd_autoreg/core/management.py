"""ManagementClient protocol — what the engine needs from the forwarder's management endpoint."""

from __future__ import annotations

from typing import Any, Protocol, Callable, Awaitable

from nfd_mgmt.models import ControlParameters, ControlResponse, FaceDescriptor, FaceEventNotification


class ManagementClient(Protocol):
    """Interface implemented by nfd_mgmt.NfdController."""

    async def issue_command(self, command: str, parameters: ControlParameters) -> ControlResponse:
        """Issue a control command. Raises CommandRejected on failure."""
        ...

    async def fetch_faces(self) -> list[FaceDescriptor]:
        """Fetch the face dataset. Raises DatasetFetchError on failure."""
        ...

    async def subscribe_face_events(
        self,
        handler: Callable[[FaceEventNotification], Awaitable[None]],
    ) -> Any:
        """Deliver face notifications to handler. Raises SubscriptionError on failure."""
        ...
