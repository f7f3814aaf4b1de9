"""Pytest configuration and shared fixtures for test suite"""

import socket
from datetime import datetime, timezone
from typing import Callable
from unittest.mock import MagicMock

import pytest

from syslog_sender.messages import BsdMessage, Rfc5424Message

# RFC3164 section 5.4, example 1
BSD_EXAMPLE_TIME = datetime(2001, 10, 11, 22, 14, 15)
# RFC5424 section 6.5, example 3
RFC5424_EXAMPLE_TIME = datetime(2003, 10, 11, 22, 14, 15, 3000, tzinfo=timezone.utc)


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "integration: tests that open sockets on the loopback interface")


@pytest.fixture
def hostname_provider() -> Callable[[], str]:
    """Hostname lookup that always answers 'mymachine'"""
    return lambda: 'mymachine'


@pytest.fixture
def bsd_message(hostname_provider) -> BsdMessage:
    """BSD message with a fixed clock and hostname"""
    return BsdMessage(clock=lambda: BSD_EXAMPLE_TIME, hostname_provider=hostname_provider)


@pytest.fixture
def rfc5424_message(hostname_provider) -> Rfc5424Message:
    """RFC5424 message with a fixed clock and hostname"""
    return Rfc5424Message(clock=lambda: RFC5424_EXAMPLE_TIME, hostname_provider=hostname_provider)


@pytest.fixture
def udp_socket() -> MagicMock:
    """Fake datagram socket accepting every byte"""
    sock = MagicMock()
    sock.sendto.side_effect = lambda data, address: len(data)
    return sock


@pytest.fixture
def tcp_socket() -> MagicMock:
    """Fake connected stream socket accepting every byte"""
    sock = MagicMock()
    sock.send.side_effect = lambda data: len(data)
    return sock


@pytest.fixture
def unused_tcp_port() -> int:
    """A loopback port with nothing listening on it"""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(('127.0.0.1', 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


@pytest.fixture
def ipv6_resolver() -> MagicMock:
    """Name lookup that only knows an IPv6 address for every host"""
    return MagicMock(side_effect=lambda host, port, type=0: [
        (socket.AF_INET6, socket.SOCK_DGRAM, 17, '', ('2001:db8::1', port, 0, 0)),
    ])
