# syslog_sender/messages.py
"""Syslog message models for the RFC3164 (BSD) and RFC5424 formats."""

import socket
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, List, Mapping, Optional, Protocol, Tuple, Union

from .constants import (
    DEFAULT_FACILITY,
    DEFAULT_SEVERITY,
    NILVALUE,
    RFC5424_VERSION,
    calculate_pri,
)

Clock = Callable[[], datetime]
HostnameProvider = Callable[[], str]
TimestampInput = Union[datetime, int, float]

# strftime('%b') follows the locale, the wire format does not
MONTHS = ('Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
          'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec')


def local_now() -> datetime:
    """Current time as an aware datetime in the local timezone."""
    return datetime.now().astimezone()


def _to_datetime(value: TimestampInput) -> datetime:
    """Accept a datetime or a UNIX timestamp."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value).astimezone()
    raise TypeError(f"Timestamp must be a datetime or a UNIX timestamp, got {type(value).__name__}")


def _text(value) -> str:
    return '' if value is None else str(value)


def format_bsd_timestamp(value: datetime) -> str:
    """Format a timestamp as RFC3164 'Mmm dd HH:MM:SS' (space padded day)."""
    return f"{MONTHS[value.month - 1]} {value.day:2d} {value:%H:%M:%S}"


def format_rfc5424_timestamp(value: datetime) -> str:
    """Format a timestamp as RFC3339, naive values are taken as local time."""
    if value.tzinfo is None:
        value = value.astimezone()
    return value.isoformat()


class Message(Protocol):
    """What a transport needs from a message."""

    @property
    def priority(self) -> int: ...

    def to_string(self) -> str: ...


class _HeaderFields(ABC):
    """Identity fields shared by both message formats.

    Every setter returns the message itself so calls can be chained. The
    hostname and timestamp are filled from the injected collaborators when
    the message is created.
    """

    def __init__(self, clock: Optional[Clock] = None,
                 hostname_provider: Optional[HostnameProvider] = None):
        self._facility = DEFAULT_FACILITY
        self._priority = DEFAULT_SEVERITY
        self._pri = calculate_pri(self._facility, self._priority)
        self._timestamp = ''
        self._hostname = ''
        self._app_name = ''
        self._msg = ''

        self.set_hostname((hostname_provider or socket.gethostname)())
        self.set_timestamp((clock or local_now)())

    @staticmethod
    @abstractmethod
    def _format_timestamp(value: datetime) -> str:
        """Render a datetime the way the format puts it on the wire."""
        pass

    def _calculate_pri(self) -> None:
        self._pri = calculate_pri(self._facility, self._priority)

    @property
    def facility(self) -> int:
        return self._facility

    def set_facility(self, facility: int):
        """Set the facility. The value is not range checked."""
        self._facility = facility
        self._calculate_pri()
        return self

    @property
    def priority(self) -> int:
        """The severity of the message (0 = emergency ... 7 = debug)."""
        return self._priority

    def set_priority(self, priority: int):
        """Set the severity. The value is not range checked."""
        self._priority = priority
        self._calculate_pri()
        return self

    set_severity = set_priority

    @property
    def severity(self) -> int:
        return self._priority

    @property
    def pri(self) -> int:
        return self._pri

    @property
    def timestamp(self) -> str:
        """The timestamp as it will appear on the wire."""
        return self._timestamp

    def set_timestamp(self, timestamp: TimestampInput):
        self._timestamp = self._format_timestamp(_to_datetime(timestamp))
        return self

    @property
    def hostname(self) -> str:
        return self._hostname

    def set_hostname(self, hostname: str):
        self._hostname = _text(hostname)
        return self

    @property
    def app_name(self) -> str:
        return self._app_name

    def set_app_name(self, app_name: str):
        self._app_name = _text(app_name)
        return self

    @property
    def msg(self) -> str:
        return self._msg

    def set_msg(self, msg: str):
        self._msg = _text(msg)
        return self

    @abstractmethod
    def to_string(self) -> str:
        """Return the wire payload, without a trailing newline."""
        pass

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_string()!r})"


class BsdMessage(_HeaderFields):
    """BSD syslog message according to RFC3164.

    This is the legacy format, only use it for collectors that do not
    understand RFC5424:

        message = (BsdMessage()
                   .set_facility(Facility.USER)
                   .set_priority(Severity.NOTICE)
                   .set_app_name('backup')
                   .set_msg('Nightly backup finished'))
        UdpTransport().send(message, '192.168.0.1')
    """

    _format_timestamp = staticmethod(format_bsd_timestamp)

    def to_string(self) -> str:
        """Return the wire payload: <PRI>TIMESTAMP HOSTNAME [APP-NAME: ]MSG"""
        header = f"<{self._pri}>{self._timestamp} {self._hostname}"
        if self._app_name:
            return f"{header} {self._app_name}: {self._msg}"
        return f"{header} {self._msg}"


@dataclass(frozen=True)
class StructuredDataBlock:
    """One SD-ELEMENT: a name plus ordered key/value parameters."""
    name: str
    params: Tuple[Tuple[str, str], ...] = ()

    def render(self) -> str:
        # Values are written verbatim, '"', '\' and ']' are not escaped
        parts = [self.name] + [f'{key}="{value}"' for key, value in self.params]
        return '[' + ' '.join(parts) + ']'


class Rfc5424Message(_HeaderFields):
    """Structured syslog message according to RFC5424.

    Unset header fields are sent as the nil value '-'. Structured data
    blocks are kept in the order they were added and are never merged,
    adding the same name twice produces two blocks.
    """

    _format_timestamp = staticmethod(format_rfc5424_timestamp)

    def __init__(self, clock: Optional[Clock] = None,
                 hostname_provider: Optional[HostnameProvider] = None):
        self._proc_id = ''
        self._msg_id = ''
        self._structured_data: List[StructuredDataBlock] = []
        super().__init__(clock=clock, hostname_provider=hostname_provider)
        self._msg = NILVALUE

    @property
    def proc_id(self) -> str:
        return self._proc_id

    def set_proc_id(self, proc_id):
        self._proc_id = _text(proc_id)
        return self

    @property
    def msg_id(self) -> str:
        return self._msg_id

    def set_msg_id(self, msg_id: str):
        self._msg_id = _text(msg_id)
        return self

    @property
    def structured_data(self) -> Tuple[StructuredDataBlock, ...]:
        return tuple(self._structured_data)

    def add_structured_data(self, name: str,
                            params: Union[Mapping[str, str], Iterable[Tuple[str, str]], None] = None):
        """Append a structured data block.

        `name` should be 'name@<enterprise number>' or an IANA registered
        name (RFC5424 section 7). Values must already be safe to put
        between double quotes.
        """
        if params is None:
            pairs = ()
        elif isinstance(params, Mapping):
            pairs = tuple((str(key), _text(value)) for key, value in params.items())
        else:
            pairs = tuple((str(key), _text(value)) for key, value in params)
        self._structured_data.append(StructuredDataBlock(name, pairs))
        return self

    def to_string(self) -> str:
        """Return the wire payload:
        <PRI>1 TIMESTAMP HOSTNAME APP-NAME PROCID MSGID STRUCTURED-DATA MSG
        """
        fields = [
            f"<{self._pri}>{RFC5424_VERSION}",
            self._timestamp or NILVALUE,
            self._hostname or NILVALUE,
            self._app_name or NILVALUE,
            self._proc_id or NILVALUE,
            self._msg_id or NILVALUE,
            ''.join(block.render() for block in self._structured_data) or NILVALUE,
            self._msg or NILVALUE,
        ]
        return ' '.join(fields)


MESSAGE_FORMATS = {
    'bsd': BsdMessage,
    'rfc3164': BsdMessage,
    'rfc5424': Rfc5424Message,
    'syslog': Rfc5424Message,
}


def create_message(message_format: str = 'rfc5424', **kwargs) -> Union[BsdMessage, Rfc5424Message]:
    """Factory function returning an empty message of the requested format."""
    try:
        message_cls = MESSAGE_FORMATS[message_format.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown message format '{message_format}', "
            f"expected one of: {', '.join(sorted(MESSAGE_FORMATS))}"
        ) from None
    return message_cls(**kwargs)
