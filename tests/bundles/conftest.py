import os

import pytest


@pytest.fixture(scope="session")
def _bundles_domain(request):
    """Initialize the bundles domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from bundles.domain import bundles

    bundles.init()
    return bundles


@pytest.fixture(scope="session", autouse=True)
def setup_db(_bundles_domain):
    from shared.db import drop_db, setup_db

    setup_db(_bundles_domain)

    yield

    drop_db(_bundles_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_bundles_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _bundles_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


@pytest.fixture()
def auth_gateway():
    """Fake identity backend with an admin, a plain user and an unprofiled user."""
    from bundles.access import reset_gateway, set_gateway
    from bundles.access.fake_adapter import FakeAuthGateway

    gateway = FakeAuthGateway()
    gateway.register("admin-token", "user-admin", role="admin")
    gateway.register("user-token", "user-plain", role="customer")
    gateway.register("noprofile-token", "user-noprofile")
    set_gateway(gateway)

    yield gateway

    reset_gateway()
