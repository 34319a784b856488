"""Decide which prefixes to register on a face."""

from __future__ import annotations

from dataclasses import dataclass
from ipaddress import ip_address

from nfd_mgmt.models import (
    ControlParameters,
    FaceDescriptor,
    FacePersistency,
    FaceScope,
    RouteOrigin,
)

from ..config import FilterConfig
from .face_uri import FaceUri
from .network import IPAddress


@dataclass(frozen=True)
class RegistrationTarget:
    prefix: str
    face_id: int
    cost: int
    origin: RouteOrigin = RouteOrigin.AUTOREG
    # None means the route never expires
    expiration: int | None = None

    def to_parameters(self) -> ControlParameters:
        return ControlParameters(
            name=self.prefix,
            face_id=self.face_id,
            origin=int(self.origin),
            cost=self.cost,
            expiration_period=self.expiration,
        )


def face_address(face: FaceDescriptor) -> IPAddress | None:
    """Unicast IP address of a non-local TCP/UDP face, or None if the face does not qualify."""
    if face.face_scope == FaceScope.LOCAL:
        return None

    uri = FaceUri.parse(face.remote_uri)
    if uri is None or not uri.has_allowed_scheme:
        return None

    try:
        address = ip_address(uri.host)
    except ValueError:
        return None
    if address.is_multicast:
        return None
    return address


def classify(face: FaceDescriptor, config: FilterConfig) -> list[RegistrationTarget]:
    """Return the registrations face should receive under config.

    All-faces prefixes apply to every qualifying face. Autoreg prefixes
    additionally require an on-demand face whose address is whitelisted
    and not blacklisted; the blacklist wins over the whitelist.
    """
    address = face_address(face)
    if address is None:
        return []

    prefixes = list(config.all_faces_prefixes)
    if (
        face.face_persistency == FacePersistency.ON_DEMAND
        and not config.is_blacklisted(address)
        and config.is_whitelisted(address)
    ):
        prefixes.extend(config.autoreg_prefixes)

    return [
        RegistrationTarget(prefix=prefix, face_id=face.face_id, cost=config.cost)
        for prefix in prefixes
    ]
