# syslog_sender/config.py
"""Configuration loader and validator."""

import os
from dataclasses import dataclass, field
from typing import Optional, Union

import yaml

from .constants import facility_code, severity_code
from .messages import MESSAGE_FORMATS
from .transports import DEFAULT_TCP_TIMEOUT, TRANSPORTS, parse_target


@dataclass
class OutputConfig:
    mode: str = "udp"
    target: str = "127.0.0.1:514"
    timeout: float = DEFAULT_TCP_TIMEOUT


@dataclass
class MessageConfig:
    format: str = "rfc5424"
    facility: Union[str, int] = "local4"
    severity: Union[str, int] = "debug"
    hostname: Optional[str] = None
    app_name: str = ""
    proc_id: str = ""
    msg_id: str = ""


@dataclass
class AppConfig:
    output: OutputConfig = field(default_factory=OutputConfig)
    message: MessageConfig = field(default_factory=MessageConfig)

    def validate(self) -> None:
        """Raise ValueError if a setting can not be used."""
        if self.output.mode.lower() not in TRANSPORTS:
            raise ValueError(f"Unknown output mode '{self.output.mode}'")
        if self.message.format.lower() not in MESSAGE_FORMATS:
            raise ValueError(f"Unknown message format '{self.message.format}'")
        if self.output.timeout <= 0:
            raise ValueError(f"Timeout must be positive, got {self.output.timeout}")
        parse_target(self.output.target)
        facility_code(self.message.facility)
        severity_code(self.message.severity)


def load_config(config_path: str = "config.yaml") -> AppConfig:
    """Load configuration from YAML file."""

    # Default configuration
    default_config = {
        'output': {
            'mode': 'udp',
            'target': '127.0.0.1:514',
            'timeout': DEFAULT_TCP_TIMEOUT,
        },
        'message': {
            'format': 'rfc5424',
            'facility': 'local4',
            'severity': 'debug',
            'hostname': None,
            'app_name': '',
            'proc_id': '',
            'msg_id': '',
        },
    }

    if os.path.exists(config_path):
        with open(config_path, 'r') as f:
            file_config = yaml.safe_load(f) or {}

        if not isinstance(file_config, dict):
            raise ValueError(f"{config_path}: expected a mapping at the top level")

        # Merge configurations
        for key in default_config:
            if key in file_config:
                section = file_config[key] or {}
                unknown = set(section) - set(default_config[key])
                if unknown:
                    raise ValueError(f"{config_path}: unknown '{key}' settings: {', '.join(sorted(unknown))}")
                default_config[key].update(section)

    config = AppConfig(
        output=OutputConfig(**default_config['output']),
        message=MessageConfig(**default_config['message']),
    )
    config.validate()
    return config
