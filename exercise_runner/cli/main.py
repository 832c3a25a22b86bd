"""Main CLI entry point for the exercise runner."""

import argparse
import sys
from typing import Optional

from .commands import check_exercises, execute_exercise, run_exercise


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '--root',
        type=str,
        default='.',
        help='Project root containing config.yaml and exercises.yaml'
    )
    parser.add_argument(
        '--config',
        type=str,
        help='Path to config file (default: ROOT/config.yaml)'
    )
    parser.add_argument(
        '--catalog',
        type=str,
        help='Path to exercise catalog (default: ROOT/exercises.yaml)'
    )
    parser.add_argument(
        '--no-color',
        action='store_true',
        help='Disable colored output'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )
    parser.add_argument(
        '--quiet',
        action='store_true',
        help='Only log errors'
    )
    parser.add_argument(
        '--log-level',
        choices=['debug', 'info', 'warn', 'error'],
        default='warn',
        help='Set log level'
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the exercise runner CLI."""
    parser = argparse.ArgumentParser(
        prog='exercise-runner',
        description='Compile and check Haskell exercises'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    run_parser = subparsers.add_parser('run', help='Compile and check one exercise')
    run_parser.add_argument('exercise', type=str, help='Exercise name')
    add_common_arguments(run_parser)

    exec_parser = subparsers.add_parser('exec', help='Compile an exercise and run it interactively')
    exec_parser.add_argument('exercise', type=str, help='Exercise name')
    add_common_arguments(exec_parser)

    check_parser = subparsers.add_parser('check', help='Compile and check every exercise')
    add_common_arguments(check_parser)

    return parser


def main(args: Optional[list] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command == 'run':
        return run_exercise(parsed_args)
    elif parsed_args.command == 'exec':
        return execute_exercise(parsed_args)
    elif parsed_args.command == 'check':
        return check_exercises(parsed_args)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
