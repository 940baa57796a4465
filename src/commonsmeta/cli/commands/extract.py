"""Page parsing and metadata collection commands for commonsmeta CLI."""

import argparse
from pathlib import Path

from ...core.config import Config
from ...extraction.template_parser import TemplateParser
from ...licenses.parser import LicenseParser
from ...services.collector import DataCollector
from ..local import LocalContentProvider, LocalFile, read_page
from ._output import print_json


def add_page_arguments(parser: argparse.ArgumentParser) -> None:
    """Add arguments shared by commands that read a description page.

    Args:
        parser: Subcommand parser to extend.
    """
    parser.add_argument("page", type=Path, help="Saved description page HTML")
    parser.add_argument(
        "--lang",
        default=None,
        help="Preferred language (default: configured language)",
    )
    parser.add_argument(
        "--multi",
        action="store_true",
        help="Return all language variants instead of one",
    )


def _create_template_parser(args, config: Config) -> TemplateParser:
    return TemplateParser(
        priority_languages=[args.lang or config.parser.language],
        multi_language=args.multi or config.parser.multi_language,
    )


def handle_parse(args, config: Config) -> None:
    """Handle parse command.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
    """
    template_parser = _create_template_parser(args, config)
    print_json(template_parser.parse_page(read_page(args.page)))


def handle_collect(args, config: Config) -> None:
    """Handle collect command.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
    """
    collector = DataCollector(
        template_parser=_create_template_parser(args, config),
        license_parser=LicenseParser(),
        content_provider=LocalContentProvider(args.page, args.category),
        language=args.lang or config.parser.language,
        max_html_bytes=config.parser.max_html_bytes,
    )
    metadata = collector.collect(LocalFile(args.page.name))
    print_json(metadata.to_dict())
