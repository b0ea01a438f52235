"""Exception hierarchy shared by the projection engine, bridge and CLI."""


class XmlDriveError(Exception):
    """Base class for xmldrive errors."""


class NotFoundError(XmlDriveError):
    """A virtual path does not resolve to anything."""

    def __init__(self, path: str):
        super().__init__(f"No such entry: {path}")
        self.path = path


class InvalidOperationError(XmlDriveError):
    """An operation was attempted against the wrong kind of entry."""

    def __init__(self, operation: str, path: str):
        super().__init__(f"{operation} not permitted on {path}")
        self.operation = operation
        self.path = path


class DurabilityError(XmlDriveError):
    """Writing a pseudo-file through to its backing file failed.

    The in-memory change has been rolled back by the time this is raised.
    """

    def __init__(self, backing_file, cause: OSError):
        super().__init__(f"Could not persist {backing_file}: {cause}")
        self.backing_file = backing_file
        self.cause = cause


class ConversionError(XmlDriveError):
    """The offline converter could not read or parse its source document."""
