from enum import Enum, IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FaceScope(str, Enum):
    NON_LOCAL = "non-local"
    LOCAL = "local"


class FacePersistency(str, Enum):
    PERSISTENT = "persistent"
    ON_DEMAND = "on-demand"
    PERMANENT = "permanent"


class LinkType(str, Enum):
    POINT_TO_POINT = "point-to-point"
    MULTI_ACCESS = "multi-access"
    AD_HOC = "adhoc"


class FaceEventKind(str, Enum):
    CREATED = "created"
    DESTROYED = "destroyed"
    UPDATED = "updated"
    UP = "up"
    DOWN = "down"


class RouteOrigin(IntEnum):
    APP = 0
    AUTOREG = 64
    CLIENT = 65
    AUTOCONF = 66
    NLSR = 128
    PREFIXANN = 129
    STATIC = 255


class FaceDescriptor(BaseModel):
    """A face as reported by the forwarder, either in the dataset or in a notification."""

    model_config = ConfigDict(frozen=True)

    face_id: int
    remote_uri: str
    local_uri: str = ""
    face_scope: FaceScope = FaceScope.NON_LOCAL
    face_persistency: FacePersistency = FacePersistency.PERSISTENT
    link_type: LinkType = LinkType.POINT_TO_POINT


class FaceDataset(BaseModel):
    faces: list[FaceDescriptor] = []


class FaceEventNotification(FaceDescriptor):
    kind: FaceEventKind

    def __str__(self) -> str:
        return (
            f"FaceEvent(kind: {self.kind.value}, faceId: {self.face_id}, "
            f"remote: {self.remote_uri}, local: {self.local_uri}, "
            f"scope: {self.face_scope.value}, persistency: {self.face_persistency.value}, "
            f"linkType: {self.link_type.value})"
        )


class ControlParameters(BaseModel):
    name: str | None = None
    face_id: int | None = None
    origin: int | None = None
    cost: int | None = None
    # Milliseconds; omitted means the route never expires
    expiration_period: int | None = None


class ControlResponse(BaseModel):
    code: int
    text: str = ""
    body: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.code == 200
