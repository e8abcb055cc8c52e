import os
import socket

import pytest

os.environ.setdefault("CALC_RATE_LIMIT_STORAGE_URL", "memory://")
os.environ.setdefault("CALC_OTEL_ENABLED", "0")


@pytest.fixture(autouse=True)
def _block_network_when_requested(monkeypatch):
    if os.getenv("NO_NETWORK", "0") != "1":
        yield
        return

    def _blocked(*_args, **_kwargs):
        raise RuntimeError("Network access blocked by NO_NETWORK=1")

    monkeypatch.setattr(socket, "socket", _blocked)
    monkeypatch.setattr(socket, "create_connection", _blocked)
    yield


@pytest.fixture
def client(monkeypatch):
    from calcapi.server import create_app

    monkeypatch.setenv("CALC_ENV", "development")
    monkeypatch.setenv("CALC_REQUIRE_BEARER", "0")

    app = create_app()
    with app.test_client() as test_client:
        yield test_client
