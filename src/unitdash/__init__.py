"""Terminal dashboard for listing, filtering and controlling systemd units."""
from importlib.metadata import PackageNotFoundError, version as _dist_version

__all__ = ["__version__"]

try:
    __version__ = _dist_version("unitdash")
except PackageNotFoundError:
    # source checkout that was never installed
    __version__ = "0.0.0+dev"
