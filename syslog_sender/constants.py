# syslog_sender/constants.py
"""Syslog facility and severity codes."""

from enum import IntEnum
from typing import Union


class Facility(IntEnum):
    """RFC5424 section 6.2.1 facilities."""
    KERNEL = 0
    USER = 1
    MAIL = 2
    SYSTEM = 3
    SECURITY = 4
    SYSLOG = 5
    PRINTER = 6
    NETWORK_NEWS = 7
    UUCP = 8
    CLOCK = 9
    AUTH = 10
    FTP = 11
    NTP = 12
    AUDIT = 13
    ALERT = 14
    CLOCK2 = 15
    LOCAL0 = 16
    LOCAL1 = 17
    LOCAL2 = 18
    LOCAL3 = 19
    LOCAL4 = 20
    LOCAL5 = 21
    LOCAL6 = 22
    LOCAL7 = 23


class Severity(IntEnum):
    """RFC5424 severities, most urgent first."""
    EMERGENCY = 0
    ALERT = 1
    CRITICAL = 2
    ERROR = 3
    WARNING = 4
    NOTICE = 5
    INFO = 6
    DEBUG = 7


# Keyword names as used by syslog.conf and friends
FACILITIES = {
    'kern': 0, 'user': 1, 'mail': 2, 'daemon': 3,
    'auth': 4, 'syslog': 5, 'lpr': 6, 'news': 7,
    'uucp': 8, 'cron': 9, 'authpriv': 10, 'ftp': 11,
    'ntp': 12, 'security': 13, 'console': 14, 'solaris-cron': 15,
    'local0': 16, 'local1': 17, 'local2': 18, 'local3': 19,
    'local4': 20, 'local5': 21, 'local6': 22, 'local7': 23
}

SEVERITIES = {
    'emergency': 0, 'emerg': 0, 'alert': 1, 'critical': 2, 'crit': 2,
    'error': 3, 'err': 3, 'warning': 4, 'warn': 4, 'notice': 5,
    'info': 6, 'debug': 7
}

DEFAULT_FACILITY = Facility.LOCAL4
DEFAULT_SEVERITY = Severity.DEBUG

NILVALUE = '-'
RFC5424_VERSION = '1'
DEFAULT_PORT = 514


def calculate_pri(facility: int, severity: int) -> int:
    """Calculate the syslog PRI value (facility * 8 + severity)."""
    return facility * 8 + severity


def _lookup(value: Union[int, str], names: dict, enum_cls, kind: str) -> int:
    if isinstance(value, int):
        return value
    text = str(value).strip()
    # Upper case is the enum member, lower case the syslog.conf keyword
    if text in enum_cls.__members__:
        return int(enum_cls[text])
    key = text.lower()
    if key.isdigit():
        return int(key)
    if key in names:
        return names[key]
    member = key.upper().replace('-', '_')
    if member in enum_cls.__members__:
        return int(enum_cls[member])
    raise ValueError(f"Unknown syslog {kind}: {value!r}")


def facility_code(value: Union[int, str]) -> int:
    """Resolve a facility enum member name, keyword or number to its code.

    Exact member names win over keywords: 'SECURITY' is Facility.SECURITY
    (4) while 'security' is the syslog.conf keyword (13).
    """
    return _lookup(value, FACILITIES, Facility, 'facility')


def severity_code(value: Union[int, str]) -> int:
    """Resolve a severity enum member name, keyword or number to its code."""
    return _lookup(value, SEVERITIES, Severity, 'severity')
