"""Base service exceptions.

Services raise these instead of HTTP errors. Host applications translate
them into responses with ``lis.api.register_exception_handlers``.
"""


class ServiceError(Exception):
    """Base service exception."""

    pass


class ValidationError(ServiceError):
    """Request rejected before or instead of changing any state."""

    pass
