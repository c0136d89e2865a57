"""Entry point for the `taskdeck` command."""

import asyncio
import sys

from taskdeck.cli.app import TaskDeckApp
from taskdeck.config import SettingsValidationError, get_settings, validate_settings
from taskdeck.logging import configure_logging


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    configure_logging(settings)

    try:
        validate_settings(settings)
    except SettingsValidationError as e:
        print(f"Invalid configuration:\n{e}", file=sys.stderr)
        return 2

    app = TaskDeckApp(settings)
    return asyncio.run(app.run(sys.argv[1:] if argv is None else argv))


if __name__ == "__main__":
    sys.exit(main())
