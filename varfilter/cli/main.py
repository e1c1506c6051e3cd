"""Main CLI entry point for varfilter."""

import argparse
import sys
from typing import Optional

from .commands import expand_templates


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the varfilter CLI."""
    parser = argparse.ArgumentParser(
        prog='varfilter',
        description='Expand $(name) placeholders in strings'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    expand_parser = subparsers.add_parser('expand', help='Expand templates')
    expand_parser.add_argument(
        'templates',
        nargs='*',
        metavar='TEMPLATE',
        help='Template strings to expand'
    )
    expand_parser.add_argument(
        '--file',
        type=str,
        help='Read the template from a file instead'
    )
    expand_parser.add_argument(
        '--define', '-D',
        action='append',
        metavar='KEY=VALUE',
        help='Configuration values (can be specified multiple times)'
    )
    expand_parser.add_argument(
        '--config',
        action='append',
        metavar='FILE',
        help='Extra YAML config file, applied after the project config'
    )
    expand_parser.add_argument(
        '--project-dir',
        type=str,
        help='Project directory (default: current directory)'
    )
    expand_parser.add_argument(
        '--package',
        type=str,
        metavar='NAME[@VERSION]',
        help='Make $(version) and $(buildir) of this package available'
    )
    expand_parser.add_argument(
        '--builddir',
        type=str,
        help='Root of package build directories'
    )
    expand_parser.add_argument(
        '--strict',
        action='store_true',
        help='Fail on unresolved placeholders'
    )
    expand_parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )
    expand_parser.add_argument(
        '--quiet',
        action='store_true',
        help='Suppress non-error output'
    )
    expand_parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    expand_parser.add_argument(
        '--log-level',
        choices=['debug', 'info', 'warn', 'error'],
        default='warn',
        help='Set log level'
    )

    return parser


def main(args: Optional[list] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if parsed_args.command == 'expand':
        return expand_templates(parsed_args)

    parser.print_help()
    return 1


if __name__ == '__main__':
    sys.exit(main())
