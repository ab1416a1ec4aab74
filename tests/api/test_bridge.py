"""Tests for restbridge.api.bridge: linking the server context's container."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from restbridge.api.bridge import GUEST_CONTAINER_ATTR, bridge_containers, get_service_container
from restbridge.api.host import HostContainer
from restbridge.core.container import Binding, Scope, ServiceContainer
from restbridge.core.errors import DuplicateBridgeError, InvalidConfigError, MissingConfigError


class Mailer:
    pass


class Audit:
    pass


def _context(container=None) -> SimpleNamespace:
    ctx = SimpleNamespace()
    if container is not None:
        setattr(ctx, GUEST_CONTAINER_ATTR, container)
    return ctx


class TestGetServiceContainer:
    def test_well_known_attribute(self):
        assert GUEST_CONTAINER_ATTR == "service_container"

    def test_returns_container(self):
        c = ServiceContainer()
        assert get_service_container(_context(c)) is c

    def test_missing(self):
        with pytest.raises(MissingConfigError) as exc_info:
            get_service_container(_context())
        assert exc_info.value.key == GUEST_CONTAINER_ATTR

    def test_wrong_type(self):
        ctx = SimpleNamespace(service_container=object())
        with pytest.raises(InvalidConfigError):
            get_service_container(ctx)


class TestBridgeContainers:
    def test_every_guest_key_resolvable_through_host(self):
        guest = ServiceContainer([
            Binding(Mailer, lambda r: Mailer()),
            Binding(Audit, lambda r: Audit(), Scope.TRANSIENT),
        ])
        host = HostContainer()
        assert bridge_containers(_context(guest), host) is True

        for key in guest.keys():
            assert host.can_resolve(key)
        assert host.resolve(Mailer) is guest.resolve(Mailer)
        assert isinstance(host.resolve(Audit), Audit)

    def test_missing_guest_is_config_error(self):
        host = HostContainer()
        with pytest.raises(MissingConfigError):
            bridge_containers(_context(), host)
        assert not host.bridged

    def test_missing_host_is_config_error(self):
        with pytest.raises(MissingConfigError):
            bridge_containers(_context(ServiceContainer()), None)

    def test_repeat_is_noop(self):
        guest = ServiceContainer()
        host = HostContainer()
        bridge_containers(_context(guest), host)
        assert bridge_containers(_context(guest), host) is False

    def test_second_guest_rejected(self):
        host = HostContainer()
        bridge_containers(_context(ServiceContainer()), host)
        with pytest.raises(DuplicateBridgeError):
            bridge_containers(_context(ServiceContainer()), host)
