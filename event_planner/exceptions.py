"""
Error types raised by the data access layer, the completion client and the engines.
"""


class EventPlannerError(Exception):
    """Base class for all event planner errors."""


class DataAccessError(EventPlannerError):
    """The database could not be reached or a statement failed."""


class RecordNotFoundError(DataAccessError):
    """A single-row lookup returned no row."""


class CompletionError(EventPlannerError):
    """The completion endpoint failed; carries the upstream message."""

    def __init__(self, message: str, upstream_message: str = None):
        super().__init__(message)
        self.upstream_message = upstream_message or message


class MalformedResponseError(CompletionError):
    """The completion response was not JSON or not the agreed shape."""
