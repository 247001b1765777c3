"""Error taxonomy shared by the repository, service and route layers.

Only the route layer turns these into HTTP status codes.
"""


class CrudTemplateError(Exception):
    """Base class for every error raised by the application layers."""


class InvalidArgumentError(CrudTemplateError, ValueError):
    """A bad id, bad pagination parameters or a missing entity."""


class NotFoundError(CrudTemplateError, LookupError):
    """No stored entity matches the lookup."""


class DataAccessError(CrudTemplateError):
    """The store failed while reading or writing."""


class ConflictError(DataAccessError):
    """The store rejected a write because of a constraint, such as a duplicate email."""


class ServiceError(CrudTemplateError):
    """A business operation failed for a reason the caller cannot fix."""
