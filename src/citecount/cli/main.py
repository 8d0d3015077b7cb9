import argparse
import asyncio
import inspect
import sys

from citecount.config import get_settings, setup_logging
from citecount.errors import CitecountError, ErrorHandler

from . import counts


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the citecount CLI."""
    parser = argparse.ArgumentParser(
        description='citecount - citation counts for bibliographic records'
    )
    parser.add_argument(
        '--log-level', type=str, default=None, help='Override the console log level'
    )
    subparsers = parser.add_subparsers(
        dest='command', help='Command to run', required=True
    )

    counts.configure_subparser(subparsers)

    args = parser.parse_args(argv)

    settings = get_settings()
    if args.log_level:
        settings = settings.model_copy(update={'log_level': args.log_level.upper()})
    setup_logging(settings)

    try:
        if inspect.iscoroutinefunction(args.func):
            asyncio.run(args.func(args, settings))
        else:
            args.func(args, settings)
    except CitecountError as e:
        ErrorHandler().handle(e)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
