# syslog_sender/transports.py
"""Transports that deliver formatted syslog messages to a collector."""

import logging
import socket
from abc import ABC, abstractmethod
from typing import Callable, Optional, TextIO, Tuple

from colorama import Fore, Style, init

from .constants import DEFAULT_PORT, Severity
from .errors import (
    ConnectionFailedError,
    InvalidTargetError,
    PartialWriteError,
    SendError,
    SocketCreationError,
)
from .messages import Message

# Initialize colorama for Windows compatibility
init(autoreset=True)

logger = logging.getLogger(__name__)

DEFAULT_TCP_TIMEOUT = 15.0
ENCODING = 'utf-8'


def parse_target(target: str, default_port: int = DEFAULT_PORT) -> Tuple[str, int]:
    """Split a 'host[:port]' target into host and port.

    IPv6 addresses take a port only in the bracketed form '[::1]:514'; a
    bare address with several colons is read as a host without port. A
    missing or empty port falls back to `default_port`.
    """
    if not isinstance(target, str) or not target.strip():
        raise InvalidTargetError(f"Empty syslog target: {target!r}")
    target = target.strip()

    if target.startswith('['):
        host, closed, rest = target[1:].partition(']')
        if not closed:
            raise InvalidTargetError(f"Unterminated IPv6 address in target '{target}'")
        if rest and not rest.startswith(':'):
            raise InvalidTargetError(f"Unexpected text after IPv6 address in target '{target}'")
        port_text = rest[1:]
    elif target.count(':') > 1:
        host, port_text = target, ''
    else:
        host, _, port_text = target.partition(':')

    if not host:
        raise InvalidTargetError(f"Missing host in target '{target}'")
    if not port_text:
        return host, default_port
    if not (port_text.isascii() and port_text.isdigit()):
        raise InvalidTargetError(f"Invalid port '{port_text}' in target '{target}'")

    port = int(port_text)
    if not 0 < port < 65536:
        raise InvalidTargetError(f"Port {port} out of range in target '{target}'")
    return host, port


class Transport(ABC):
    """Abstract base class for message transports."""

    @abstractmethod
    def send(self, message: Message, target: str) -> None:
        """Deliver one message to `target`, raising a DeliveryError on failure."""
        pass

    def close(self) -> None:
        """Nothing is kept open between sends."""
        pass


class UdpTransport(Transport):
    """Send each message as a single UDP datagram.

    UDP is stateless, a successful send only means the local stack took
    the datagram, not that the collector received it.
    """

    def __init__(self, default_port: int = DEFAULT_PORT,
                 socket_factory: Callable[..., socket.socket] = socket.socket,
                 resolver: Callable[..., list] = socket.getaddrinfo):
        self.default_port = default_port
        self._socket_factory = socket_factory
        self._resolver = resolver

    def send(self, message: Message, target: str) -> None:
        host, port = parse_target(target, self.default_port)
        payload = message.to_string().encode(ENCODING)
        # The first address decides between IPv4 and IPv6
        try:
            family, _, _, _, address = self._resolver(host, port, type=socket.SOCK_DGRAM)[0]
        except (OSError, IndexError) as e:
            raise SendError(f"Error resolving {host}: {e}") from e

        try:
            sock = self._socket_factory(family, socket.SOCK_DGRAM)
        except OSError as e:
            raise SocketCreationError(f"Error creating socket: [{e.errno}] {e.strerror}") from e

        try:
            sent = sock.sendto(payload, address)
        except OSError as e:
            raise SendError(f"Error sending message to {host}:{port}: {e}") from e
        finally:
            sock.close()

        if sent != len(payload):
            raise SendError(f"Error sending message to {host}:{port}, "
                            f"datagram truncated to {sent} of {len(payload)} bytes")
        logger.debug(f"UDP message sent to {host}:{port} ({sent} bytes)")


class TcpTransport(Transport):
    """Send each message over its own TCP connection.

    The message is terminated with a newline so a stream receiver can find
    its end. Short writes are retried with the remaining bytes until the
    connection stops accepting data. A connection is opened and closed for
    every send().
    """

    def __init__(self, timeout: float = DEFAULT_TCP_TIMEOUT, default_port: int = DEFAULT_PORT,
                 connection_factory: Callable[..., socket.socket] = socket.create_connection):
        self.timeout = timeout
        self.default_port = default_port
        self._connection_factory = connection_factory

    def send(self, message: Message, target: str) -> None:
        host, port = parse_target(target, self.default_port)
        payload = (message.to_string() + '\n').encode(ENCODING)

        try:
            sock = self._connection_factory((host, port), timeout=self.timeout)
        except OSError as e:
            raise ConnectionFailedError(f"Error connecting to {host}:{port}: {e}") from e

        written = 0
        try:
            while written < len(payload):
                chunk = sock.send(payload[written:])
                if not chunk:
                    break
                written += chunk
        except OSError as e:
            raise SendError(f"Error sending message to {host}:{port}: {e}") from e
        finally:
            sock.close()

        if written != len(payload):
            raise PartialWriteError(
                f"Error sending message to {host}:{port}, not all bytes sent "
                f"({written} of {len(payload)})",
                written=written,
                expected=len(payload),
            )
        logger.debug(f"TCP message sent to {host}:{port} ({written} bytes)")


class ConsoleTransport(Transport):
    """Print messages to the console instead of sending them, color coded
    by severity."""

    SEVERITY_COLORS = {
        Severity.EMERGENCY: Fore.MAGENTA + Style.BRIGHT,
        Severity.ALERT: Fore.MAGENTA,
        Severity.CRITICAL: Fore.RED + Style.BRIGHT,
        Severity.ERROR: Fore.RED,
        Severity.WARNING: Fore.YELLOW,
        Severity.NOTICE: Fore.CYAN,
        Severity.INFO: Fore.GREEN,
        Severity.DEBUG: Fore.WHITE + Style.DIM,
    }

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    def send(self, message: Message, target: str) -> None:
        host, port = parse_target(target)
        color = self.SEVERITY_COLORS.get(message.priority, Fore.WHITE)
        print(f"{color}[{host}:{port}] {message.to_string()}{Style.RESET_ALL}", file=self.stream)


TRANSPORTS = {
    'udp': UdpTransport,
    'tcp': TcpTransport,
    'console': ConsoleTransport,
}


def create_transport(mode: str, timeout: float = DEFAULT_TCP_TIMEOUT) -> Transport:
    """Factory function to create the transport for an output mode."""
    mode = mode.lower()
    if mode == 'udp':
        return UdpTransport()
    elif mode == 'tcp':
        return TcpTransport(timeout=timeout)
    elif mode == 'console':
        return ConsoleTransport()
    raise ValueError(f"Unknown transport '{mode}', expected one of: {', '.join(TRANSPORTS)}")
