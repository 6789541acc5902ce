import asyncio
import logging
import sys
from . import main
from .errors import VelcroError

logger = logging.getLogger("velcro")

def _configure_logging(verbose: bool) -> None:
    # No timestamps: this is an interactive tool
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)-7s %(message)s",
        stream=sys.stderr,
    )

def main_entry(argv=None) -> int:
    args = main.build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        asyncio.run(main.app(args))
    except asyncio.CancelledError:
        pass
    except VelcroError as err:
        logger.error("%s", err)
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main_entry())
