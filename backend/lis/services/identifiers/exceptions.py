"""Identifier allocation exceptions."""

from lis.services.exceptions import ServiceError, ValidationError


class StoreUnavailable(ServiceError):
    """Counter store could not be reached or the operation was not committed.

    No identifier is ever handed out when this is raised. The underlying
    backend error is available as ``__cause__``.
    """

    def __init__(self, name: str | None, message: str):
        self.name = name
        super().__init__(message)


class InvalidSequenceName(ValidationError):
    """Requested sequence is not one the allocator knows how to format."""

    def __init__(self, name: str, known: list[str]):
        self.name = name
        self.known = known
        super().__init__(f"Unknown sequence {name!r}, expected one of: {', '.join(known)}")


class CounterRegression(ValidationError):
    """Administrative advance would move a counter backwards."""

    def __init__(self, name: str, current: int, requested: int):
        self.name = name
        self.current = current
        self.requested = requested
        super().__init__(f"Counter {name!r} is at {current}, refusing to set it to {requested}")
