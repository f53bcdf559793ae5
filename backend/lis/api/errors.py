"""Exception handlers translating allocation errors into HTTP responses."""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from lis.services.identifiers.exceptions import CounterRegression, InvalidSequenceName, StoreUnavailable

logger = structlog.get_logger(__name__)


async def store_unavailable_handler(request: Request, exc: Exception) -> JSONResponse:
    """Abort the enclosing create operation with 503."""
    logger.error(
        "Identifier allocation unavailable",
        path=request.url.path,
        sequence=getattr(exc, "name", None),
        error=str(exc),
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Identifier allocation is temporarily unavailable"},
    )


async def invalid_counter_request_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    """Install allocation error handlers on a host application."""
    app.add_exception_handler(StoreUnavailable, store_unavailable_handler)
    app.add_exception_handler(InvalidSequenceName, invalid_counter_request_handler)
    app.add_exception_handler(CounterRegression, invalid_counter_request_handler)
