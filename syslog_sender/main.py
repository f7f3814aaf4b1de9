# syslog_sender/main.py
"""Command line entry point: format one syslog message and send it."""

import argparse
import logging
import shlex
import sys
from typing import List, Optional, Sequence, Tuple

import yaml

from .config import AppConfig, load_config
from .constants import facility_code, severity_code
from .errors import DeliveryError
from .messages import MESSAGE_FORMATS, Rfc5424Message, create_message
from .transports import TRANSPORTS, create_transport

StructuredDataArg = Tuple[str, List[Tuple[str, str]]]


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def parse_structured_data(value: str) -> StructuredDataArg:
    """Parse 'NAME key=value key2="some value"' into a block name and pairs."""
    try:
        tokens = shlex.split(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid structured data '{value}': {e}")
    if not tokens:
        raise argparse.ArgumentTypeError("structured data needs a block name")

    name, params = tokens[0], []
    for token in tokens[1:]:
        key, sep, param_value = token.partition('=')
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"expected key=value, got '{token}'")
        params.append((key, param_value))
    return name, params


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog='syslog-sender',
        description='Send a single syslog message (RFC3164 or RFC5424) over UDP or TCP',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # RFC5424 message over UDP to the default port 514
  syslog-sender --target 192.168.1.100 "Backup finished"

  # BSD message over TCP
  syslog-sender --format bsd --mode tcp --target logs.example.com:1514 \\
      --facility auth --severity crit --app-name su "'su root' failed"

  # Structured data, printed instead of sent
  syslog-sender --mode console --sd 'origin@32473 ip="10.0.0.1"' "Started"
        """
    )
    parser.add_argument('message', nargs='+', help='Message text')

    # Output options
    output_group = parser.add_argument_group('Output Options')
    output_group.add_argument(
        '--mode', '-m',
        choices=sorted(TRANSPORTS),
        default=None,
        help='Transport (default: from config or udp)'
    )
    output_group.add_argument(
        '--target', '-t',
        default=None,
        help='Collector as host[:port] (default: from config or 127.0.0.1:514)'
    )
    output_group.add_argument(
        '--timeout',
        type=float,
        default=None,
        help='TCP connect timeout in seconds (default: 15)'
    )

    # Message options
    message_group = parser.add_argument_group('Message Options')
    message_group.add_argument(
        '--format', '-f',
        choices=sorted(MESSAGE_FORMATS),
        default=None,
        help='Message format (default: from config or rfc5424)'
    )
    message_group.add_argument('--facility', default=None, help='Facility name or number')
    message_group.add_argument('--severity', '-s', default=None, help='Severity name or number')
    message_group.add_argument('--hostname', default=None, help='Hostname (default: this machine)')
    message_group.add_argument('--app-name', '-a', default=None, help='Application name')
    message_group.add_argument('--proc-id', default=None, help='Process id (rfc5424 only)')
    message_group.add_argument('--msg-id', default=None, help='Message id (rfc5424 only)')
    message_group.add_argument(
        '--sd',
        action='append',
        type=parse_structured_data,
        default=[],
        metavar='"NAME key=value ..."',
        help='Structured data block, may be repeated (rfc5424 only)'
    )

    # Configuration
    config_group = parser.add_argument_group('Configuration')
    config_group.add_argument(
        '--config',
        default='config.yaml',
        help='Path to configuration file (default: config.yaml)'
    )
    config_group.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    return parser.parse_args(argv)


def apply_arguments(config: AppConfig, args: argparse.Namespace) -> None:
    """Override config with command line arguments."""
    if args.mode:
        config.output.mode = args.mode
    if args.target:
        config.output.target = args.target
    if args.timeout is not None:
        config.output.timeout = args.timeout
    if args.format:
        config.message.format = args.format
    if args.facility is not None:
        config.message.facility = args.facility
    if args.severity is not None:
        config.message.severity = args.severity
    if args.hostname:
        config.message.hostname = args.hostname
    if args.app_name is not None:
        config.message.app_name = args.app_name
    if args.proc_id is not None:
        config.message.proc_id = args.proc_id
    if args.msg_id is not None:
        config.message.msg_id = args.msg_id


def build_message(config: AppConfig, text: str,
                  structured_data: Sequence[StructuredDataArg] = ()):
    """Build the message described by the configuration."""
    settings = config.message
    message = create_message(settings.format)
    message.set_facility(facility_code(settings.facility)) \
           .set_priority(severity_code(settings.severity)) \
           .set_app_name(settings.app_name) \
           .set_msg(text)
    if settings.hostname:
        message.set_hostname(settings.hostname)

    if isinstance(message, Rfc5424Message):
        message.set_proc_id(settings.proc_id).set_msg_id(settings.msg_id)
        for name, params in structured_data:
            message.add_structured_data(name, params)
    elif structured_data:
        raise ValueError("Structured data is only supported by the rfc5424 format")
    return message


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)
    setup_logging(args.verbose)

    # Load configuration
    try:
        config = load_config(args.config)
        apply_arguments(config, args)
        config.validate()
        message = build_message(config, ' '.join(args.message), args.sd)
    except (ValueError, TypeError, OSError, yaml.YAMLError) as e:
        logging.error(f"Invalid configuration: {e}")
        return 1

    transport = create_transport(config.output.mode, timeout=config.output.timeout)
    try:
        transport.send(message, config.output.target)
    except DeliveryError as e:
        logging.error(f"Delivery failed: {e}")
        return 1
    finally:
        transport.close()

    logging.info(f"Message sent via {config.output.mode} to {config.output.target}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
