class UnitdashError(Exception):
    """Base class for errors raised by unitdash."""


class ManagerError(UnitdashError):
    pass


class ManagerConnectionError(ManagerError):
    """The service manager bus could not be reached."""


class ManagerCallError(ManagerError):
    """A specific list/start/stop/... call was rejected by the manager."""


class ValidationError(UnitdashError):
    """Request rejected before reaching the service manager."""


class BusyError(UnitdashError):
    """Another action is still in flight."""
