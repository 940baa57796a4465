"""License name command for commonsmeta CLI."""

from dataclasses import asdict

from ...core.config import Config
from ...licenses.parser import LicenseParser
from ._output import print_json


def handle_license(args, config: Config) -> None:
    """Handle license command.

    Prints each license name with its parsed form and priority, highest
    priority first.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
    """
    license_parser = LicenseParser()
    ordered = license_parser.sort_data_by_license_priority(
        args.licenses, lambda name, _key: name
    )

    results = []
    for name in ordered.values():
        descriptor = license_parser.parse_license_string(name)
        results.append(
            {
                "input": name,
                "license": asdict(descriptor) if descriptor else None,
                "priority": license_parser.get_license_priority(descriptor),
            }
        )
    print_json(results)
