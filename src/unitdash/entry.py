import sys
from typing import List

from .cli import app


SUBCOMMANDS = {
    "ps",
    "dash",
    "version",
    "--version",
    "-h",
    "--help",
}


def main(argv: List[str] | None = None):
    if argv is None:
        argv = sys.argv[1:]

    # Handle version early to avoid Click group error
    if argv and argv[0] == "--version":
        from . import __version__
        print(__version__)
        return

    # Default command: "unitdash [opts]" opens the dashboard
    if not argv or argv[0] not in SUBCOMMANDS:
        argv = ["dash", *argv]

    app(args=argv, prog_name="unitdash")
