"""Tests for restbridge.api.host: the dispatch-side injector."""

from __future__ import annotations

import pytest

from restbridge.api.host import HostContainer
from restbridge.core.container import Binding, Scope, ServiceContainer
from restbridge.core.errors import DuplicateBridgeError, UnsatisfiedDependencyError


class Repo:
    pass


class UnitOfWork:
    def __init__(self, repo: Repo) -> None:
        self.repo = repo


class TestHostRegistration:
    def test_singleton(self):
        host = HostContainer()
        host.register(Repo, lambda r: Repo(), Scope.SINGLETON)
        assert host.resolve(Repo) is host.resolve(Repo)

    def test_transient(self):
        host = HostContainer()
        host.register(Repo, lambda r: Repo(), Scope.TRANSIENT)
        assert host.resolve(Repo) is not host.resolve(Repo)

    def test_register_instance(self):
        host = HostContainer()
        repo = Repo()
        host.register_instance(Repo, repo)
        assert host.resolve(Repo) is repo

    def test_request_scope_cached_per_request(self):
        host = HostContainer()
        host.register(Repo, lambda r: Repo())
        first_request: dict = {}
        second_request: dict = {}
        a = host.resolve(Repo, first_request)
        assert host.resolve(Repo, first_request) is a
        assert host.resolve(Repo, second_request) is not a

    def test_request_scope_requires_cache(self):
        host = HostContainer()
        host.register(Repo, lambda r: Repo(), Scope.REQUEST)
        with pytest.raises(UnsatisfiedDependencyError, match="request-scoped"):
            host.resolve(Repo)

    def test_nested_resolution_shares_request_scope(self):
        host = HostContainer()
        host.register(Repo, lambda r: Repo())
        host.register(UnitOfWork, lambda r: UnitOfWork(r.resolve(Repo)))
        cache: dict = {}
        uow = host.resolve(UnitOfWork, cache)
        assert uow.repo is host.resolve(Repo, cache)

    def test_reregister_replaces_singleton(self):
        host = HostContainer()
        host.register(Repo, lambda r: Repo(), Scope.SINGLETON)
        old = host.resolve(Repo)
        host.register(Repo, lambda r: Repo(), Scope.SINGLETON)
        assert host.resolve(Repo) is not old

    def test_unknown_key(self):
        with pytest.raises(UnsatisfiedDependencyError):
            HostContainer().resolve(Repo)


class TestHostBridge:
    def test_unbridged(self):
        host = HostContainer()
        assert not host.bridged
        assert host.guest is None
        assert not host.can_resolve(Repo)

    def test_forwards_to_guest_same_instance(self):
        guest = ServiceContainer([Binding(Repo, lambda r: Repo())])
        host = HostContainer()
        assert host.bridge(guest) is True
        assert host.bridged
        assert host.can_resolve(Repo)
        assert host.resolve(Repo) is guest.resolve(Repo)
        assert host.resolve(Repo, {}) is guest.resolve(Repo)

    def test_guest_transient_stays_transient(self):
        guest = ServiceContainer([Binding(Repo, lambda r: Repo(), Scope.TRANSIENT)])
        host = HostContainer()
        host.bridge(guest)
        assert host.resolve(Repo) is not host.resolve(Repo)

    def test_host_binding_wins_over_guest(self):
        guest_repo, host_repo = Repo(), Repo()
        guest = ServiceContainer([Binding.instance(Repo, guest_repo)])
        host = HostContainer()
        host.bridge(guest)
        host.register_instance(Repo, host_repo)
        assert host.resolve(Repo) is host_repo

    def test_host_factory_can_use_guest_services(self):
        guest = ServiceContainer([Binding(Repo, lambda r: Repo())])
        host = HostContainer()
        host.bridge(guest)
        host.register(UnitOfWork, lambda r: UnitOfWork(r.resolve(Repo)))
        assert host.resolve(UnitOfWork, {}).repo is guest.resolve(Repo)

    def test_same_guest_is_noop(self):
        guest = ServiceContainer()
        host = HostContainer()
        assert host.bridge(guest) is True
        assert host.bridge(guest) is False
        assert host.guest is guest

    def test_different_guest_rejected(self):
        host = HostContainer()
        first = ServiceContainer()
        host.bridge(first)
        with pytest.raises(DuplicateBridgeError):
            host.bridge(ServiceContainer())
        assert host.guest is first

    def test_unknown_key_after_bridge(self):
        host = HostContainer()
        host.bridge(ServiceContainer())
        with pytest.raises(UnsatisfiedDependencyError):
            host.resolve(Repo)
