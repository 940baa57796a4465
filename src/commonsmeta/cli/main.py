"""CLI entry point for commonsmeta."""

import argparse
import sys
from pathlib import Path
from typing import NoReturn

from loguru import logger

from .. import __version__
from ..core.config import Config
from ..core.exceptions import CommonsMetadataError
from . import commands


def configure_logging(verbose: bool = False) -> None:
    """Send log output to stderr at DEBUG when verbose, else INFO."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="commonsmeta",
        description="Extract metadata from Wikimedia Commons file description pages",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("-c", "--config", default=None, help="Path to a YAML config file")

    subparsers = parser.add_subparsers(dest="command", required=False)

    # parse
    parse_parser = subparsers.add_parser(
        "parse", help="Print the templates found on a description page"
    )
    commands.add_page_arguments(parse_parser)

    # license
    license_parser = subparsers.add_parser(
        "license", help="Parse and rank license names"
    )
    license_parser.add_argument("licenses", nargs="+", help="License names")

    # collect
    collect_parser = subparsers.add_parser(
        "collect", help="Print the reconciled metadata of a description page"
    )
    commands.add_page_arguments(collect_parser)
    collect_parser.add_argument(
        "--category",
        action="append",
        default=[],
        help="Category of the file (repeatable)",
    )

    # verify
    verify_parser = subparsers.add_parser(
        "verify", help="Print attribution problems of a rendered file page"
    )
    verify_parser.add_argument("page", type=Path, help="Rendered page HTML")
    verify_parser.add_argument(
        "--mime",
        default="image/jpeg",
        help="MIME type of the file (default: image/jpeg)",
    )
    verify_parser.add_argument(
        "--template",
        action="append",
        default=[],
        help="Title of a template transcluded by the page (repeatable)",
    )

    return parser


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = Config.from_env_or_file(args.config)

        if args.command == "parse":
            commands.handle_parse(args, config)
        elif args.command == "license":
            commands.handle_license(args, config)
        elif args.command == "collect":
            commands.handle_collect(args, config)
        elif args.command == "verify":
            commands.handle_verify(args, config)
        else:
            parser.print_help()

        sys.exit(0)
    except CommonsMetadataError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
