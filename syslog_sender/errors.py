# syslog_sender/errors.py
"""Exceptions raised while delivering syslog messages."""


class DeliveryError(Exception):
    """Base class for every failure of a transport's send()."""


class InvalidTargetError(DeliveryError, ValueError):
    """The target is not a usable host[:port] string."""


class SocketCreationError(DeliveryError):
    """The local socket could not be created."""


class ConnectionFailedError(DeliveryError):
    """The collector could not be reached within the timeout."""


class SendError(DeliveryError):
    """The operating system rejected the write."""


class PartialWriteError(SendError):
    """Only part of the payload was accepted by the connection."""

    def __init__(self, message: str, written: int, expected: int):
        super().__init__(message)
        self.written = written
        self.expected = expected
