"""Forwarder management client over NATS."""

from nfd_mgmt.client import DEFAULT_REQUEST_TIMEOUT, ManagementConnection
from nfd_mgmt.controller import NfdController
from nfd_mgmt.errors import (
    CommandRejected,
    DatasetFetchError,
    MalformedMessageError,
    ManagementError,
    SubscriptionError,
)
from nfd_mgmt.subjects import Subjects

__all__ = [
    "DEFAULT_REQUEST_TIMEOUT",
    "CommandRejected",
    "DatasetFetchError",
    "MalformedMessageError",
    "ManagementConnection",
    "ManagementError",
    "NfdController",
    "Subjects",
    "SubscriptionError",
]
