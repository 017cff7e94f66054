"""
Command-line interface for orgchart.

This module provides a CLI for inspecting, normalizing and previewing
org chart files without a graphical renderer.
"""

import argparse
import json
import logging
import sys
import warnings
from pathlib import Path

from .. import __version__
from ..config.settings import get_settings
from ..core.editor import OrgChartEditor
from ..core.models import FlatRecord
from ..core.errors import OrgChartError
from ..infrastructure.csv_loader import load_csv_file
from ..infrastructure.logging_config import setup_logging, get_logger
from ..infrastructure.paths import default_delimiter_for


logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser for the CLI.

    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(
        prog="orgchart",
        description="Organization chart import, preview and export tool"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"orgchart {__version__}"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    parser.add_argument(
        "-d", "--delimiter",
        help="Column delimiter (default: tab for .tsv files, otherwise from settings)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    info_parser = subparsers.add_parser("info", help="Display chart statistics")
    info_parser.add_argument("file", type=Path, help="CSV/TSV file to read")

    validate_parser = subparsers.add_parser("validate", help="Check that a file imports cleanly")
    validate_parser.add_argument("file", type=Path, help="CSV/TSV file to read")

    tree_parser = subparsers.add_parser("tree", help="Print the display tree as JSON")
    tree_parser.add_argument("file", type=Path, help="CSV/TSV file to read")
    tree_parser.add_argument("--collapse", nargs="+", default=[], metavar="ID",
                             help="Node ids to show collapsed")

    export_parser = subparsers.add_parser("export", help="Re-export a file in parent-before-child order")
    export_parser.add_argument("file", type=Path, help="CSV/TSV file to read")
    export_parser.add_argument("output", type=Path, nargs="?",
                               help="Output file (default: export filename from settings)")

    return parser


def _read_records(args: argparse.Namespace) -> list[FlatRecord]:
    """Parse the file named on the command line."""
    delimiter = args.delimiter
    if delimiter is None:
        delimiter = default_delimiter_for(args.file, fallback=get_settings().csv_delimiter)
    return load_csv_file(args.file, delimiter=delimiter)


def _load_editor(records: list[FlatRecord]) -> OrgChartEditor:
    """Build an editor session from parsed records."""
    editor = OrgChartEditor(settings=get_settings())
    with warnings.catch_warnings():
        # Notices are logged by the editor and printed by the commands
        warnings.simplefilter("ignore")
        editor.import_records(records)
    return editor


def cmd_info(args: argparse.Namespace) -> int:
    """
    Display statistics about an org chart file.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Exit code (0 for success).
    """
    records = _read_records(args)
    editor = _load_editor(records)
    forest = editor.forest

    print(f"File: {args.file}")
    print(f"Records: {len(records)}")
    print(f"Nodes in chart: {len(forest)}")
    print(f"Dropped (isolated or duplicate id): {len(records) - len(forest)}")
    print(f"Roots: {len(forest.roots)}")
    for root in forest.roots:
        print(f"  {root.id}: {root.name} ({len(forest.descendant_ids(root.id))} below)")
    for notice in editor.notices:
        print(f"Warning: {notice}")

    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """
    Check that a file parses and yields a non-empty chart.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Exit code (0 for a usable file).
    """
    editor = _load_editor(_read_records(args))

    for notice in editor.notices:
        print(f"Warning: {notice}")

    if len(editor.forest) == 0:
        print("✗ No chart could be built from this file")
        return 1

    print(f"✓ {len(editor.forest)} node(s) under {len(editor.forest.roots)} root(s)")
    return 0


def cmd_tree(args: argparse.Namespace) -> int:
    """
    Print the projected display tree as JSON.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Exit code (0 for success).
    """
    editor = _load_editor(_read_records(args))

    for node_id in args.collapse:
        editor.toggle_collapse(node_id)

    tree = editor.display_tree()
    print(json.dumps(tree.to_dict() if tree is not None else None, indent=2, ensure_ascii=False))
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    """
    Import a file and export it again, normalized.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Exit code (0 for success).
    """
    editor = _load_editor(_read_records(args))

    if len(editor.forest) == 0:
        logger.error(f"Nothing to export from {args.file}")
        return 1

    output_path = editor.export_file(args.output, delimiter=args.delimiter)
    print(f"Exported {len(editor.forest)} node(s) to {output_path}")
    return 0


def main(argv=None):
    """
    Main entry point for the CLI.

    Returns:
        Exit code.
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    log_level = logging.DEBUG if args.verbose else settings.log_level
    setup_logging(level=log_level, log_file=settings.log_file_path, log_to_file=settings.log_to_file)

    commands = {
        "info": cmd_info,
        "validate": cmd_validate,
        "tree": cmd_tree,
        "export": cmd_export,
    }

    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        return 0

    try:
        return handler(args)
    except OrgChartError as e:
        logger.error(f"Failed to process {args.file}: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
