"""Errors raised by the management client."""

from __future__ import annotations

# Controller-side status codes for failures that never reached the forwarder
ERROR_TIMEOUT = 10060
ERROR_NACK = 10800
ERROR_SERVER = 500


class ManagementError(Exception):
    """Base class for management protocol failures."""


class MalformedMessageError(ManagementError):
    """A management reply or notification is not a JSON object."""

    def __init__(self, subject: str, reason: str) -> None:
        super().__init__(f"Malformed message on {subject}: {reason}")
        self.subject = subject
        self.reason = reason


class CommandRejected(ManagementError):
    """A control command was refused or could not be completed."""

    def __init__(self, code: int, text: str) -> None:
        super().__init__(f"{text} (code {code})")
        self.code = code
        self.text = text


class DatasetFetchError(ManagementError):
    """A status dataset could not be retrieved."""


class SubscriptionError(ManagementError):
    """A notification stream could not be subscribed to."""
