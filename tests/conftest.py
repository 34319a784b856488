"""Pytest configuration and fixtures for nfd-autoreg tests."""

from unittest.mock import AsyncMock

import pytest

from nfd_mgmt.models import (
    ControlResponse,
    FaceDescriptor,
    FaceEventKind,
    FaceEventNotification,
    FacePersistency,
    FaceScope,
)


def make_face(
    face_id: int = 264,
    remote_uri: str = "udp4://192.0.2.5:6363",
    scope: FaceScope = FaceScope.NON_LOCAL,
    persistency: FacePersistency = FacePersistency.ON_DEMAND,
) -> FaceDescriptor:
    return FaceDescriptor(
        face_id=face_id,
        remote_uri=remote_uri,
        local_uri="udp4://192.0.2.1:6363",
        face_scope=scope,
        face_persistency=persistency,
    )


def make_event(
    face_id: int = 264,
    remote_uri: str = "udp4://192.0.2.5:6363",
    kind: FaceEventKind = FaceEventKind.CREATED,
    scope: FaceScope = FaceScope.NON_LOCAL,
    persistency: FacePersistency = FacePersistency.ON_DEMAND,
) -> FaceEventNotification:
    return FaceEventNotification(
        kind=kind,
        face_id=face_id,
        remote_uri=remote_uri,
        local_uri="udp4://192.0.2.1:6363",
        face_scope=scope,
        face_persistency=persistency,
    )


@pytest.fixture
def mock_client():
    """Management client that accepts every command and reports no faces."""
    client = AsyncMock()
    client.issue_command = AsyncMock(return_value=ControlResponse(code=200, text="OK"))
    client.fetch_faces = AsyncMock(return_value=[])
    client.subscribe_face_events = AsyncMock(return_value=AsyncMock())
    return client
