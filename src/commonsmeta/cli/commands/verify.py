"""Attribution check command for commonsmeta CLI."""

from ...core.config import Config
from ...extraction.template_parser import TemplateParser
from ...licenses.parser import LicenseParser
from ...services.collector import DataCollector
from ..local import LocalContentProvider, LocalFile, LocalRenderedPage, read_page


def handle_verify(args, config: Config) -> None:
    """Handle verify command.

    Prints one problem code per line; nothing when the page is complete.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
    """
    collector = DataCollector(
        template_parser=TemplateParser([config.parser.language]),
        license_parser=LicenseParser(),
        content_provider=LocalContentProvider(args.page),
        max_html_bytes=config.parser.max_html_bytes,
    )
    page = LocalRenderedPage(text=read_page(args.page), templates=args.template)
    problems = collector.verify_attribution_metadata(
        page, LocalFile(args.page.name, mime_type=args.mime)
    )
    for problem in sorted(problems):
        print(problem)
