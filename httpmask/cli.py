"""Command-line interface for httpmask."""

import sys
import logging
import argparse
from pathlib import Path
from typing import Optional, TextIO

logger = logging.getLogger(__name__)

from httpmask import __version__
from httpmask.config.loader import load_config, ConfigError, DEFAULT_CONFIG_NAME
from httpmask.config.validator import validate_config, ValidationError
from httpmask.config.factory import build_parameter_obfuscator, build_header_obfuscator
from httpmask.errors import ObfuscationError
from httpmask.http.parameters import RequestParameterObfuscator


def create_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        prog='httpmask',
        description='Mask sensitive request parameters and header values',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Mask query strings in a log excerpt, one per line
  httpmask --config httpmask.yaml queries.txt

  # Mask a parameter without a config file
  echo 'user=alice&password=hunter2' | httpmask -p password

  # Truncate long output
  httpmask -p token --limit 80 queries.txt

  # Treat the whole input as one form body
  httpmask --stream -p password < body.txt

  # Mask a header value
  httpmask -H 'Authorization:Bearer abc123'
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '--config',
        type=str,
        metavar='PATH',
        help='Path to config file (default: ./httpmask.yaml if present)'
    )

    parser.add_argument(
        '-p', '--parameter',
        dest='parameters',
        action='append',
        default=[],
        metavar='NAME',
        help='Parameter to mask completely (repeatable)'
    )

    parser.add_argument(
        '-H', '--header',
        dest='headers',
        action='append',
        default=[],
        metavar='NAME:VALUE',
        help='Header to mask and print instead of reading input (repeatable)'
    )

    parser.add_argument(
        '--limit',
        type=int,
        metavar='N',
        help='Truncate each output after N characters'
    )

    parser.add_argument(
        '--no-indicator',
        action='store_true',
        help='Do not append a truncation indicator'
    )

    parser.add_argument(
        '--stream',
        action='store_true',
        help='Treat all input as a single parameter string instead of one per line'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Override logging.level from the config'
    )

    parser.add_argument(
        'files',
        nargs='*',
        metavar='FILE',
        help='Input files (default: standard input)'
    )

    return parser


def _setup_logging(config: dict) -> None:
    """
    Setup logging configuration from config.

    Log output goes to stderr so it never mixes with masked output on stdout.

    Args:
        config: Configuration dictionary
    """
    logging_config = config.get('logging', {})

    level_str = logging_config.get('level', 'WARNING').upper()
    level = getattr(logging, level_str, logging.WARNING)

    handlers = []

    if logging_config.get('console', True):
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        formatter = logging.Formatter('%(levelname)s: %(message)s')
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    log_file = logging_config.get('file')
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        handlers=handlers or [logging.NullHandler()],
        force=True
    )

    # httpx logs full request URLs at DEBUG, query strings included
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)


def _load_config(path: Optional[str]) -> dict:
    """Load the given config, or the default one if it exists, or an empty one."""
    if path is None and not (Path.cwd() / DEFAULT_CONFIG_NAME).exists():
        return {'parameters': {}, 'headers': {}, 'logging': {}}
    return load_config(path)


def mask_input(
    parameters: RequestParameterObfuscator,
    source: TextIO,
    destination: TextIO,
    stream: bool = False
) -> None:
    """
    Mask parameter strings read from source into destination.

    Args:
        parameters: Obfuscator to apply
        source: Input text stream
        destination: Output text sink
        stream: Treat the whole input as one parameter string; otherwise
            every line is masked separately and line endings are kept
    """
    if stream:
        parameters.obfuscate_stream(source, destination)
        return

    for line in source:
        text = line.rstrip('\r\n')
        parameters.obfuscate_text_to(text, destination)
        destination.write(line[len(text):])


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for httpmask CLI.

    Args:
        argv: Command-line arguments (default: sys.argv)

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    # Load and validate configuration
    try:
        config = _load_config(args.config)
        validate_config(config)
    except (ConfigError, ValidationError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    # Apply CLI overrides
    if args.log_level:
        config.setdefault('logging', {})['level'] = args.log_level

    if args.limit is not None:
        config['limit'] = args.limit

    if args.no_indicator:
        config['truncated_indicator'] = None

    _setup_logging(config)

    try:
        parameters = build_parameter_obfuscator(config, extra_parameters=args.parameters)
        headers = build_header_obfuscator(config)
    except ObfuscationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    try:
        if args.headers:
            for header in args.headers:
                name, sep, value = header.partition(':')
                if not sep:
                    print("Invalid header (expected NAME:VALUE)", file=sys.stderr)
                    return 1
                print(f"{name}: {headers.obfuscate_header(name, value.strip())}")
            return 0

        if not args.files:
            mask_input(parameters, sys.stdin, sys.stdout, stream=args.stream)
        for path in args.files:
            with open(path, 'r', encoding='utf-8') as f:
                mask_input(parameters, f, sys.stdout, stream=args.stream)
        sys.stdout.flush()
    except KeyboardInterrupt:
        print("\nInterrupted by user.", file=sys.stderr)
        return 130
    except (ObfuscationError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
