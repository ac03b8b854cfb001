import asyncio
import logging
from typing import Optional

import typer

from . import __version__
from .config import Settings, settings_from_env
from .errors import ManagerConnectionError, ManagerError, ValidationError
from .filtering import apply_filter
from .logging_setup import configure_logging
from .systemd_bus import SystemdManager
from .view import ViewRow, format_rows

logger = logging.getLogger(__name__)


app = typer.Typer(
    name="unitdash",
    add_completion=False,
    no_args_is_help=False,
    help=(
        "Terminal dashboard for systemd units.\n\n"
        "Usage:\n"
        "  unitdash [dash] [opts]     Open the interactive dashboard\n"
        "  unitdash ps [QUERY]        List units whose name contains QUERY\n\n"
        "Settings may also come from UNITDASH_* environment variables."
    ),
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def _root(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show version and exit",
        is_eager=True,
    )
):
    if version:
        typer.echo(__version__)
        raise typer.Exit()


def _load_settings(**overrides) -> Settings:
    try:
        return settings_from_env().override(**overrides)
    except ValidationError as e:
        typer.echo(f"invalid setting: {e}", err=True)
        raise typer.Exit(code=2)


def _bus_name(user: Optional[bool]) -> Optional[str]:
    if user is None:
        return None
    return "user" if user else "system"


@app.command()
def version():
    """Show CLI version (semver)."""
    typer.echo(__version__)


@app.command("ps")
def ps(
    query: str = typer.Argument("", help="Case-insensitive substring of the unit name"),
    user: Optional[bool] = typer.Option(None, "--user/--system", help="Use the user or system manager"),
    unit_type: Optional[str] = typer.Option(None, "--type", help="Only units of this type, e.g. service"),
):
    """List units. Prints: name\tload\tactive\tsub\tdescription"""
    settings = _load_settings(bus=_bus_name(user), unit_type=unit_type)

    async def _ps():
        async with SystemdManager(settings.bus_type, unit_type=settings.unit_type) as manager:
            return await manager.list_units()

    try:
        units = asyncio.run(_ps())
    except ManagerError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)
    for line in format_rows(ViewRow.from_unit(u) for u in apply_filter(units, query)):
        typer.echo(line)


@app.command()
def dash(
    user: Optional[bool] = typer.Option(None, "--user/--system", help="Use the user or system manager"),
    page_size: Optional[int] = typer.Option(None, "--page-size", help="Rows per page [default: 10]"),
    unit_type: Optional[str] = typer.Option(None, "--type", help="Only units of this type, e.g. service"),
    filter_mode: Optional[str] = typer.Option(None, "--filter-mode", help="Filter edits: live|confirm"),
    refresh_interval: Optional[float] = typer.Option(
        None, "--refresh-interval", help="Auto-refresh every N seconds (0 disables)"
    ),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Write logs to this file"),
):
    """Open the interactive dashboard (Textual UI) over systemd units."""
    settings = _load_settings(
        bus=_bus_name(user),
        page_size=page_size,
        unit_type=unit_type,
        filter_mode=filter_mode.lower() if filter_mode else None,
        refresh_interval=refresh_interval,
        log_file=log_file,
    )
    configure_logging(settings.log_file, settings.log_level)
    logger.info("Starting dashboard on %s bus (page size %d)", settings.bus, settings.page_size)

    # Lazy import to avoid importing Textual for non-interactive commands
    from .dash.app import run_dash

    try:
        run_dash(settings)
    except ManagerConnectionError as e:
        logger.error("Startup failed: %s", e)
        typer.echo(f"Failed to connect to systemd: {e}", err=True)
        raise typer.Exit(code=1)
