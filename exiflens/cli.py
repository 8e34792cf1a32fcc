# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Command-line interface for ExifLens

Prints the metadata of one or more image files.

Copyright 2025 DNAi inc.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from exiflens import __version__
from exiflens.core import get_supported_formats, read_file_metadata
from exiflens.exceptions import ExifLensError
from exiflens.metadata_utils import filter_metadata_by_prefix, get_metadata_summary
from exiflens.options import ParseOptions, available_options


def format_output(metadata: dict, format_type: str = "text") -> str:
    """
    Format metadata output based on format type.

    Args:
        metadata: Dictionary of metadata
        format_type: Output format ('text', 'json', 'csv')

    Returns:
        Formatted output string
    """
    if format_type == "json":
        return json.dumps(metadata, indent=2, ensure_ascii=False)
    elif format_type == "csv":
        lines = ["Tag,Value"]
        for tag, value in sorted(metadata.items()):
            # Escape quotes in CSV
            tag_str = str(tag).replace('"', '""')
            value_str = str(value).replace('"', '""')
            lines.append(f'"{tag_str}","{value_str}"')
        return "\n".join(lines)
    else:  # text format (default)
        lines = []
        for tag, value in sorted(metadata.items()):
            lines.append(f"{tag}: {value}")
        return "\n".join(lines)


def parse_option_assignments(args: List[str]) -> ParseOptions:
    """
    Build parse options from NAME=VALUE strings.

    Raises:
        ValueError: If an assignment is malformed or names an unknown option
    """
    options = ParseOptions()
    for arg in args:
        if '=' not in arg:
            raise ValueError(f"Option must be NAME=VALUE: {arg}")
        name, value = arg.split('=', 1)
        options.set_option(name.strip(), value.strip())
    return options


def read_metadata(
    file_path: Path,
    options: Optional[ParseOptions] = None,
    prefixes: Optional[List[str]] = None,
    summary: bool = False,
    format_type: str = "text"
) -> str:
    """
    Read metadata from a file and format it.

    Raises:
        ExifLensError: If the file cannot be parsed
        OSError: If the file cannot be read
    """
    metadata = read_file_metadata(file_path, options)
    if prefixes:
        metadata = filter_metadata_by_prefix(metadata, prefixes)
    if summary:
        metadata = get_metadata_summary(metadata)
    return format_output(metadata, format_type)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='exiflens',
        description='Extract embedded metadata from JPEG, TIFF, PNG and WebP images.',
        epilog=f"Supported formats: {', '.join(get_supported_formats())}",
    )
    parser.add_argument('files', nargs='*', type=Path, help='Image files to read')
    output = parser.add_mutually_exclusive_group()
    output.add_argument('-j', '--json', dest='format_type', action='store_const', const='json',
                        help='Output as JSON')
    output.add_argument('--csv', dest='format_type', action='store_const', const='csv',
                        help='Output as CSV')
    parser.set_defaults(format_type='text')
    parser.add_argument('-s', '--summary', action='store_true',
                        help='Print only the camera/date/exposure/GPS summary')
    parser.add_argument('-t', '--tags', action='append', metavar='PREFIX',
                        help='Only print fields starting with PREFIX (repeatable)')
    parser.add_argument('-o', '--option', action='append', default=[], metavar='NAME=VALUE',
                        help='Set a parse option (repeatable)')
    parser.add_argument('--list-options', action='store_true', help='List parse options and exit')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log parser diagnostics to stderr')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point. Returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(name)s: %(message)s')

    if args.list_options:
        for name, info in sorted(available_options().items()):
            print(f"{name} ({info['type']}, default {info['default']}): {info['description']}")
        return 0

    if not args.files:
        parser.error('at least one file is required')

    try:
        options = parse_option_assignments(args.option)
    except ValueError as e:
        parser.error(str(e))

    exit_code = 0
    for file_path in args.files:
        if len(args.files) > 1:
            print(f"======== {file_path}")
        try:
            print(read_metadata(file_path, options, args.tags, args.summary, args.format_type))
        except (ExifLensError, OSError) as e:
            print(f"Error: {file_path}: {e}", file=sys.stderr)
            exit_code = 1
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
