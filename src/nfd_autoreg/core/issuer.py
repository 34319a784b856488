"""Turns registration targets into rib/register commands."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable

from nfd_mgmt.errors import CommandRejected

from .classifier import RegistrationTarget
from .management import ManagementClient

logger = logging.getLogger(__name__)

RIB_REGISTER = "rib/register"


class CommandIssuer:
    """Fire-and-forget registration: one command per target, no retry."""

    def __init__(self, client: ManagementClient) -> None:
        self._client = client
        self._pending: set[asyncio.Task] = set()
        self._closed = False

    @property
    def pending(self) -> int:
        return len(self._pending)

    def dispatch(self, targets: Iterable[RegistrationTarget]) -> None:
        """Start one registration command per target. Must run inside the event loop."""
        if self._closed:
            return
        for target in targets:
            task = asyncio.create_task(self._register(target))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

    async def _register(self, target: RegistrationTarget) -> None:
        try:
            await self._client.issue_command(RIB_REGISTER, target.to_parameters())
        except CommandRejected as e:
            if not self._closed:
                self.on_failure(target, e.code, e.text)
            return
        except Exception as e:
            if not self._closed:
                logger.exception("Unexpected error registering %s on face %d", target.prefix, target.face_id)
                self.on_failure(target, -1, str(e) or type(e).__name__)
            return
        if not self._closed:
            self.on_success(target)

    @staticmethod
    def on_success(target: RegistrationTarget) -> None:
        logger.info("SUCCESS: register %s on face %d", target.prefix, target.face_id)

    @staticmethod
    def on_failure(target: RegistrationTarget, code: int, reason: str) -> None:
        logger.error(
            "FAILED: register %s on face %d (code: %d, reason: %s)",
            target.prefix,
            target.face_id,
            code,
            reason,
        )

    async def join(self) -> None:
        """Wait for every in-flight command to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel in-flight commands; their outcomes are no longer reported."""
        self._closed = True
        pending = list(self._pending)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
