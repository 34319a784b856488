"""Tests for face classification."""

import pytest

from conftest import make_face
from nfd_autoreg.config import FilterConfig
from nfd_autoreg.core.classifier import RegistrationTarget, classify
from nfd_autoreg.core.network import NetworkRange
from nfd_mgmt.models import FacePersistency, FaceScope, RouteOrigin


def _config(**kwargs) -> FilterConfig:
    values = {"autoreg_prefixes": ("/autoreg",), "cost": 10}
    values.update(kwargs)
    return FilterConfig(**values)


def _prefixes(targets: list[RegistrationTarget]) -> list[str]:
    return [t.prefix for t in targets]


class TestRejectedFaces:
    @pytest.mark.parametrize("persistency", list(FacePersistency))
    def test_local_scope_never_registers(self, persistency):
        config = _config(all_faces_prefixes=("/all",))
        face = make_face(scope=FaceScope.LOCAL, persistency=persistency)
        assert classify(face, config) == []

    @pytest.mark.parametrize(
        "uri",
        [
            "unix:///run/nfd/nfd.sock",
            "fd://23",
            "ether://[01:00:5e:00:17:aa]",
            "udp://192.0.2.5:6363",
            "internal://",
        ],
    )
    def test_non_ip_point_to_point_scheme(self, uri):
        config = _config(all_faces_prefixes=("/all",))
        assert classify(make_face(remote_uri=uri), config) == []

    @pytest.mark.parametrize(
        "uri",
        ["udp4://224.0.0.1:56363", "udp4://224.0.23.170:56363", "udp6://[ff02::1234]:56363"],
    )
    @pytest.mark.parametrize("persistency", list(FacePersistency))
    def test_multicast_never_registers(self, uri, persistency):
        config = _config(all_faces_prefixes=("/all",))
        assert classify(make_face(remote_uri=uri, persistency=persistency), config) == []

    def test_unparsable_host(self):
        config = _config(all_faces_prefixes=("/all",))
        assert classify(make_face(remote_uri="tcp4://router.example.net:6363"), config) == []

    def test_garbage_uri(self):
        assert classify(make_face(remote_uri="%%%"), _config()) == []


class TestAutoreg:
    def test_default_allow_scenario(self):
        face = make_face(face_id=300, remote_uri="udp4://192.0.2.5:6363")
        targets = classify(face, _config())
        assert targets == [RegistrationTarget(prefix="/autoreg", face_id=300, cost=10)]
        assert targets[0].origin == RouteOrigin.AUTOREG
        assert targets[0].expiration is None

    @pytest.mark.parametrize(
        "uri",
        ["udp4://198.51.100.7:6363", "tcp4://203.0.113.1:6363", "udp6://[2001:db8::5]:6363", "tcp6://[2001:db8::9]:6363"],
    )
    def test_empty_filters_allow_everything(self, uri):
        assert _prefixes(classify(make_face(remote_uri=uri), _config())) == ["/autoreg"]

    def test_blacklisted(self):
        config = _config(blacklist=(NetworkRange.parse("192.0.2.0/24"),))
        assert classify(make_face(remote_uri="udp4://192.0.2.5:6363"), config) == []

    def test_blacklist_wins_over_whitelist(self):
        config = _config(
            whitelist=(NetworkRange.parse("192.0.2.0/24"),),
            blacklist=(NetworkRange.parse("192.0.2.4/30"),),
        )
        assert classify(make_face(remote_uri="udp4://192.0.2.5:6363"), config) == []
        assert _prefixes(classify(make_face(remote_uri="udp4://192.0.2.9:6363"), config)) == ["/autoreg"]

    def test_not_whitelisted(self):
        config = _config(whitelist=(NetworkRange.parse("10.0.0.0/8"),))
        assert classify(make_face(remote_uri="udp4://192.0.2.5:6363"), config) == []

    def test_ipv4_whitelist_does_not_cover_ipv6(self):
        config = _config(whitelist=(NetworkRange.parse("0.0.0.0/0"),))
        assert classify(make_face(remote_uri="udp6://[2001:db8::5]:6363"), config) == []

    @pytest.mark.parametrize("persistency", [FacePersistency.PERSISTENT, FacePersistency.PERMANENT])
    def test_requires_on_demand(self, persistency):
        assert classify(make_face(persistency=persistency), _config()) == []

    def test_cost_is_copied(self):
        targets = classify(make_face(), _config(cost=42, autoreg_prefixes=("/a", "/b")))
        assert [t.cost for t in targets] == [42, 42]


class TestAllFaces:
    def test_persistent_face_gets_all_faces_only(self):
        config = _config(all_faces_prefixes=("/all",))
        targets = classify(make_face(persistency=FacePersistency.PERSISTENT), config)
        assert _prefixes(targets) == ["/all"]

    def test_filters_do_not_apply(self):
        config = _config(
            all_faces_prefixes=("/all",),
            whitelist=(NetworkRange.parse("10.0.0.0/8"),),
            blacklist=(NetworkRange.parse("192.0.2.0/24"),),
        )
        targets = classify(make_face(remote_uri="udp4://192.0.2.5:6363"), config)
        assert _prefixes(targets) == ["/all"]

    def test_all_faces_then_autoreg_in_configured_order(self):
        config = _config(autoreg_prefixes=("/x", "/y"), all_faces_prefixes=("/b", "/a"))
        targets = classify(make_face(face_id=7), config)
        assert _prefixes(targets) == ["/b", "/a", "/x", "/y"]
        assert {t.face_id for t in targets} == {7}


class TestRegistrationTarget:
    def test_to_parameters(self):
        params = RegistrationTarget(prefix="/autoreg", face_id=300, cost=10).to_parameters()
        assert params.model_dump(exclude_none=True) == {
            "name": "/autoreg",
            "face_id": 300,
            "origin": 64,
            "cost": 10,
        }
