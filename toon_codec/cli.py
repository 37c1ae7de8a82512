# -*- coding: utf-8 -*-
"""Location: ./toon_codec/cli.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

TOON command line.
Converts JSON to TOON and back, reading from a file or standard input and
writing to a file or standard output:
- Direction from ``-e/--encode``, ``-d/--decode``, or the input extension
  (``.toon`` decodes, anything else encodes)
- Streaming TOON output (no full document held in memory) unless ``--stats``
- JSON vs TOON token estimates with ``--stats``
- Defaults from ``TOON_*`` environment variables (see ``toon_codec.config``)

Exit status is 0 on success and 1 on any error; diagnostics go to stderr.

Examples:
    >>> parser = create_parser()
    >>> args = parser.parse_args(["data.json", "--delimiter", "pipe", "--indent", "4"])
    >>> resolve_mode(args), args.delimiter, args.indent
    ('encode', 'pipe', '4')
    >>> resolve_mode(parser.parse_args(["data.toon"]))
    'decode'
"""

# Standard
import argparse
import logging
import os
from pathlib import Path
import sys
from typing import Iterable, NoReturn, Optional, Sequence

# Third-Party
import orjson

# First-Party
from toon_codec import __version__
from toon_codec.config import get_settings
from toon_codec.decoder import decode
from toon_codec.encoder import encode, encode_lines
from toon_codec.errors import InvalidIndentError, ToonDecodeError, ToonError
from toon_codec.models import DecodeOptions, EncodeOptions, resolve_decode_options, resolve_encode_options
from toon_codec.stats import estimate_token_savings

logger = logging.getLogger(__name__)

STDIN_LABEL = "stdin"
TOON_EXTENSION = ".toon"


class CLIError(Exception):
    """Base class for CLI-related errors."""


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports usage errors as ``CLIError``."""

    def error(self, message: str) -> NoReturn:
        """Raise instead of exiting with status 2.

        Args:
            message: Usage error description.

        Raises:
            CLIError: Always.
        """
        raise CLIError(message)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the ``toon`` command.

    Returns:
        Configured argument parser
    """
    settings = get_settings()
    parser = _ArgumentParser(prog="toon", description="Convert JSON to TOON (Token-Oriented Object Notation) and back")

    parser.add_argument("--version", "-V", action="version", version=f"toon {__version__}")
    parser.add_argument("input", nargs="?", default=None, help="Input file path (default: standard input; '-' also means standard input)")
    parser.add_argument("--output", "-o", help="Output file path (default: standard output)")

    direction = parser.add_mutually_exclusive_group()
    direction.add_argument("--encode", "-e", action="store_true", help="Encode JSON to TOON (default unless the input ends in .toon)")
    direction.add_argument("--decode", "-d", action="store_true", help="Decode TOON to JSON")

    parser.add_argument("--indent", default=str(settings.indent), help=f"Spaces per nesting level (default: {settings.indent})")
    parser.add_argument("--delimiter", default=settings.delimiter, help=f"Array delimiter: comma, tab, pipe, or the character itself (default: {settings.delimiter})")

    parser.add_argument(
        "--key-folding", nargs="?", const="safe", choices=["off", "safe"], default=settings.key_folding, help=f"Fold single-key object chains into dotted keys when encoding (default: {settings.key_folding})"
    )
    parser.add_argument("--flatten-depth", type=int, default=settings.flatten_depth, help="Maximum segments per folded key (default: unbounded)")
    parser.add_argument("--strict", action=argparse.BooleanOptionalAction, default=settings.strict, help=f"Strict structural validation when decoding (default: {settings.strict})")
    parser.add_argument("--expand-paths", nargs="?", const="safe", choices=["off", "safe"], default="off", help="Expand dotted keys into nested objects when decoding (default: off)")
    parser.add_argument("--stats", action="store_true", help="Show JSON vs TOON token estimates after encoding")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    return parser


def resolve_mode(args: argparse.Namespace) -> str:
    """Pick the conversion direction.

    Args:
        args: Parsed command line arguments

    Returns:
        "encode" or "decode"
    """
    if args.decode:
        return "decode"
    if args.encode:
        return "encode"
    if args.input and args.input != "-" and args.input.lower().endswith(TOON_EXTENSION):
        return "decode"
    return "encode"


def parse_indent(value: str) -> int:
    """Parse the ``--indent`` value.

    Args:
        value: Raw flag value

    Returns:
        Indent width

    Raises:
        InvalidIndentError: If the value is not a positive integer

    Examples:
        >>> parse_indent("4")
        4
        >>> try:
        ...     parse_indent("two")
        ... except InvalidIndentError as e:
        ...     print(e)
        Invalid indent value: 'two'
    """
    try:
        indent = int(value)
    except (TypeError, ValueError):
        raise InvalidIndentError(f"Invalid indent value: {value!r}")
    if indent <= 0:
        raise InvalidIndentError(f"Invalid indent value: {value!r}")
    return indent


def build_encode_options(args: argparse.Namespace) -> EncodeOptions:
    """Build encoding options from the command line.

    Args:
        args: Parsed command line arguments

    Returns:
        Validated encoding options
    """
    return resolve_encode_options(
        {
            "indent": parse_indent(args.indent),
            "delimiter": args.delimiter,
            "key_folding": args.key_folding,
            "flatten_depth": args.flatten_depth,
        }
    )


def build_decode_options(args: argparse.Namespace) -> DecodeOptions:
    """Build decoding options from the command line.

    Args:
        args: Parsed command line arguments

    Returns:
        Validated decoding options
    """
    return resolve_decode_options({"indent": parse_indent(args.indent), "strict": args.strict, "expand_paths": args.expand_paths})


def format_input_label(path: Optional[str]) -> str:
    """Describe the input for confirmation messages.

    Args:
        path: Input path, or None/"-" for standard input

    Returns:
        "stdin" or the path relative to the working directory
    """
    if path is None or path == "-":
        return STDIN_LABEL
    return os.path.relpath(path)


def read_input(path: Optional[str]) -> str:
    """Read the whole input as text.

    Args:
        path: Input path, or None/"-" for standard input

    Returns:
        Input text

    Raises:
        CLIError: If the input cannot be read or is not valid UTF-8
    """
    label = format_input_label(path)
    try:
        if path is None or path == "-":
            return sys.stdin.read()
        return Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise CLIError(f"Failed to read input `{label}`: {e}")
    except OSError as e:
        raise CLIError(f"Failed to read input `{label}`: {e.strerror or e}")


def write_output(text: str, path: Optional[str]) -> None:
    """Write a complete document to a file or standard output.

    Args:
        text: Document text (no trailing newline)
        path: Output path, or None for standard output

    Raises:
        CLIError: If the file cannot be written
    """
    if path is None:
        print(text)
        return
    try:
        Path(path).write_text(text, encoding="utf-8")
    except OSError as e:
        raise CLIError(f"Failed to write output `{path}`: {e.strerror or e}")


def write_streaming_toon(lines: Iterable[str], path: Optional[str]) -> None:
    """Write TOON lines one at a time.

    Files get the lines joined by newlines with no trailing newline, exactly
    what ``encode`` returns; standard output gets one final newline.

    Args:
        lines: Lines without terminators
        path: Output path, or None for standard output

    Raises:
        CLIError: If the file cannot be written
    """
    if path is None:
        first = True
        for line in lines:
            if not first:
                sys.stdout.write("\n")
            sys.stdout.write(line)
            first = False
        sys.stdout.write("\n")
        return

    try:
        with Path(path).open("w", encoding="utf-8") as handle:
            first = True
            for line in lines:
                if not first:
                    handle.write("\n")
                handle.write(line)
                first = False
    except OSError as e:
        raise CLIError(f"Failed to write output `{path}`: {e.strerror or e}")


def encode_command(args: argparse.Namespace) -> None:
    """Execute the encode direction.

    Args:
        args: Parsed command line arguments

    Raises:
        CLIError: If the input is not valid JSON
    """
    options = build_encode_options(args)
    json_text = read_input(args.input)
    try:
        data = orjson.loads(json_text)
    except orjson.JSONDecodeError as e:
        raise CLIError(f"Failed to parse JSON: {e}")

    if args.stats:
        toon_text = encode(data, options)
        write_output(toon_text, args.output)
    else:
        write_streaming_toon(encode_lines(data, options), args.output)

    if args.output:
        print(f"Encoded `{format_input_label(args.input)}` → `{os.path.relpath(args.output)}`", file=sys.stderr)

    if args.stats:
        savings = estimate_token_savings(json_text, toon_text)
        print(file=sys.stderr)
        print(f"Token estimates: ~{savings.json_tokens} (JSON) → ~{savings.toon_tokens} (TOON)", file=sys.stderr)
        print(f"Saved ~{savings.saved_tokens} tokens (-{savings.saved_percent:.1f}%)", file=sys.stderr)


def decode_command(args: argparse.Namespace) -> None:
    """Execute the decode direction.

    Args:
        args: Parsed command line arguments

    Raises:
        CLIError: If the input is not valid TOON or the result cannot be written as JSON
    """
    # Delimiter validation applies in both directions
    build_encode_options(args)
    options = build_decode_options(args)
    toon_text = read_input(args.input)
    try:
        data = decode(toon_text, options)
    except ToonDecodeError as e:
        raise CLIError(f"Failed to decode TOON: {e}")

    try:
        json_text = orjson.dumps(data, option=orjson.OPT_INDENT_2).decode("utf-8")
    except orjson.JSONEncodeError as e:
        # Integers beyond 64 bits
        raise CLIError(f"Failed to encode JSON: {e}")
    write_output(json_text, args.output)
    if args.output:
        print(f"Decoded `{format_input_label(args.input)}` → `{os.path.relpath(args.output)}`", file=sys.stderr)


def configure_logging(verbose: bool) -> None:
    """Configure root logging for a CLI run.

    Args:
        verbose: Force DEBUG level
    """
    level = logging.DEBUG if verbose else getattr(logging, get_settings().log_level)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Arguments without the program name (default: ``sys.argv[1:]``)

    Returns:
        Process exit status
    """
    try:
        parser = create_parser()
        args = parser.parse_args(argv)
    except CLIError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except SystemExit as e:
        # --help and --version
        return e.code if isinstance(e.code, int) else 0
    except ValueError as e:
        # Invalid TOON_* environment settings
        print(f"Error: {e}", file=sys.stderr)
        return 1

    configure_logging(args.verbose)
    mode = resolve_mode(args)
    logger.debug(f"Running {mode} on {format_input_label(args.input)}")

    try:
        if mode == "decode":
            decode_command(args)
        else:
            encode_command(args)
    except (CLIError, ToonError) as e:
        logger.error(f"toon {mode} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
