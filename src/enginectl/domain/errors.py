"""Error taxonomy for destination resolution and registry persistence.

Every error carries a stable ``code`` that the service layer copies into
:class:`~enginectl.services.result.ServiceError`.
"""

from __future__ import annotations


class DestinationError(Exception):
    """Base class for all connection errors surfaced to the user."""

    code = "DESTINATION_ERROR"


class InvalidOptionError(DestinationError):
    """A malformed option, e.g. a legacy key other than ``host``."""

    code = "INVALID_OPTION"


class UnsupportedOptionError(DestinationError):
    """An option that the resolved scheme does not accept."""

    code = "UNSUPPORTED_OPTION"


class InvalidDestinationError(DestinationError):
    """Unparsable URI, missing tcp port, or a unix path that is not a socket."""

    code = "INVALID_DESTINATION"


class FilesystemError(DestinationError):
    """A stat failure other than not-found or permission-denied."""

    code = "FILESYSTEM_ERROR"


class PersistenceError(DestinationError):
    """The connection registry could not be read or written."""

    code = "PERSISTENCE_ERROR"
