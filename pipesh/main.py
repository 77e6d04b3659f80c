#!/usr/bin/env python3
"""
pipesh - entry point

Start-up sequence:
1. Load configuration (optional file)
2. Initialize logging
3. Run the interpreter loop
4. Shut logging down

Author: pipesh developers
Version: 1.0.0
"""

import argparse
import sys
from typing import Optional, List

from pipesh import __version__
from pipesh.core.config_loader import ConfigLoader
from pipesh.exceptions import ConfigError
from pipesh.logger import Logger, LogLevel
from pipesh.shell.shell import Shell


EXIT_CONFIG_ERROR = 2


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='pipesh',
        description='A small command interpreter with two-stage pipes.'
    )
    parser.add_argument(
        '--config',
        metavar='PATH',
        help='JSON configuration file'
    )
    parser.add_argument(
        '--log-level',
        metavar='LEVEL',
        help='override logging.level (DEBUG, INFO, WARNING, ERROR, CRITICAL)'
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for pipesh.

    Returns:
        Process exit status
    """
    args = build_arg_parser().parse_args(argv)
    loader = ConfigLoader()

    try:
        if args.config:
            loader.load(args.config)
        if args.log_level:
            loader.set('logging.level', args.log_level.upper())
    except ConfigError as e:
        print(f"pipesh: {e.message}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    config = loader.config
    Logger.initialize(
        level=LogLevel.from_name(config.logging.level),
        log_file=config.logging.log_file,
        console_output=config.logging.console_output,
    )

    try:
        return Shell(config).run()
    finally:
        Logger.shutdown()


if __name__ == '__main__':
    sys.exit(main())
