# syslog_sender/__init__.py
"""
Syslog Sender - format syslog messages and send them to a collector.

This package builds RFC3164 (BSD) and RFC5424 syslog messages and delivers
them over UDP or TCP, one message per send.
"""

__version__ = '1.0.0'

from .constants import Facility, Severity, calculate_pri, facility_code, severity_code
from .errors import (
    DeliveryError,
    InvalidTargetError,
    SocketCreationError,
    ConnectionFailedError,
    SendError,
    PartialWriteError,
)
from .messages import BsdMessage, Rfc5424Message, StructuredDataBlock, create_message
from .transports import (
    Transport,
    UdpTransport,
    TcpTransport,
    ConsoleTransport,
    create_transport,
    parse_target,
)
from .config import load_config, AppConfig

__all__ = [
    'Facility',
    'Severity',
    'calculate_pri',
    'facility_code',
    'severity_code',
    'DeliveryError',
    'InvalidTargetError',
    'SocketCreationError',
    'ConnectionFailedError',
    'SendError',
    'PartialWriteError',
    'BsdMessage',
    'Rfc5424Message',
    'StructuredDataBlock',
    'create_message',
    'Transport',
    'UdpTransport',
    'TcpTransport',
    'ConsoleTransport',
    'create_transport',
    'parse_target',
    'load_config',
    'AppConfig',
]
