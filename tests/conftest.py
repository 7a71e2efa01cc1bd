"""Shared fixtures: a live server on an ephemeral port and the --runslow option."""
import socket
import threading
from typing import Iterator, Tuple

import pytest

from prime_time.server.server import PrimeServer


def pytest_addoption(parser) -> None:
    parser.addoption("--runslow", action="store_true", default=False, help="run slow tests")


def pytest_collection_modifyitems(config, items) -> None:
    if config.getoption("--runslow"):
        return
    skip_slow = pytest.mark.skip(reason="needs --runslow")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


def start_server(workers: int) -> Tuple[PrimeServer, Tuple[str, int], threading.Thread]:
    """Start a server on 127.0.0.1 with a free port in a background thread."""
    server = PrimeServer(host="127.0.0.1", port=0, workers=workers, poll_interval=0.05)
    address = server.bind()
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    return server, address, thread


@pytest.fixture
def server_factory() -> Iterator:
    """Build live servers and stop them at teardown."""
    started = []

    def factory(workers: int = 4) -> Tuple[str, int]:
        server, address, thread = start_server(workers)
        started.append((server, thread))
        return address

    yield factory

    for server, thread in started:
        server.shutdown()
        thread.join(timeout=5)


@pytest.fixture
def server_address(server_factory) -> Tuple[str, int]:
    """Address of a live server with four workers."""
    return server_factory(4)


@pytest.fixture
def connect(server_address):
    """Open client sockets to the live server, closed at teardown."""
    sockets = []

    def factory(address: Tuple[str, int] = server_address) -> socket.socket:
        s = socket.create_connection(address, timeout=5)
        sockets.append(s)
        return s

    yield factory

    for s in sockets:
        s.close()
