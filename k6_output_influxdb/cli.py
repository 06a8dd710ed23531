"""CLI entry point for the k6 InfluxDB output."""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .client.writer import write_precision
from .config import get_consolidated_config, validate_config
from .config.constants import OUTPUT_LABEL, OUTPUT_NAME
from .errors import ConfigError
from .output.fields import make_field_kinds


def check_config(argument: str, config_file: Optional[str] = None) -> int:
    """Resolve and validate the configuration the way the output would."""
    json_config = None
    if config_file:
        json_config = Path(config_file).read_text(encoding="utf-8")

    try:
        config = get_consolidated_config(json_config, dict(os.environ), argument)
        validate_config(config)
        write_precision(config.precision)
        field_kinds = make_field_kinds(config.tags_as_fields or ())
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    print(f"{OUTPUT_LABEL} ({config.addr})")
    print(json.dumps(config.describe(), indent=2))
    if field_kinds:
        print("Tags written as fields:")
        for name, kind in field_kinds.items():
            print(f"   {name}: {kind.value}")
    return 0


def main(argv: Optional[list] = None) -> int:
    """Main CLI function."""
    parser = argparse.ArgumentParser(description=f"{OUTPUT_NAME} output tools")
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    check_parser = subparsers.add_parser('check', help='Resolve and validate the output configuration')
    check_parser.add_argument('argument', nargs='?', default='', help='Output URL argument, e.g. http://localhost:8086/k6')
    check_parser.add_argument('--config', help='JSON config file')
    check_parser.add_argument('--env-file', help='.env file with K6_INFLUXDB_* variables')

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if args.command == 'check':
        if args.env_file:
            load_dotenv(args.env_file)
        else:
            load_dotenv()
        return check_config(args.argument, args.config)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
