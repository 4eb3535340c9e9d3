"""Error handling middleware and exception handlers."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exception_handlers import http_exception_handler
import structlog

from src.domain.exceptions import (
    DomainException,
    PushFailedException,
    TenantRegistrationException,
)
from .request_context import get_request_id

logger = structlog.get_logger(__name__)


def error_handler_middleware(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI app.

    Maps domain exceptions to appropriate HTTP responses.
    """

    @app.exception_handler(PushFailedException)
    async def push_failed_handler(
        request: Request,
        exc: PushFailedException,
    ) -> JSONResponse:
        """Handle STK push failures without exposing the cause."""
        logger.error(
            "stk_push_failed",
            request_id=get_request_id(),
            shortcode=exc.shortcode,
            cause=type(exc.__cause__).__name__ if exc.__cause__ else None,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": exc.code,
                "message": exc.message,
                "request_id": get_request_id(),
            },
        )

    @app.exception_handler(TenantRegistrationException)
    async def registration_failed_handler(
        request: Request,
        exc: TenantRegistrationException,
    ) -> JSONResponse:
        """Handle registration failures in the registration response format."""
        logger.warning(
            "registration_failed",
            request_id=get_request_id(),
            shortcode=exc.shortcode,
            message=exc.message,
        )
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "error": exc.message,
            },
        )

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle generic domain exceptions."""
        logger.warning(
            "domain_exception",
            request_id=get_request_id(),
            code=exc.code,
            message=exc.message,
        )
        return JSONResponse(
            status_code=400,
            content={
                "error": exc.code,
                "message": exc.message,
                "request_id": get_request_id(),
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def not_found_handler(
        request: Request,
        exc: StarletteHTTPException,
    ):
        """Log requests to unknown routes; other HTTP errors pass through."""
        if exc.status_code != 404:
            return await http_exception_handler(request, exc)

        logger.warning(
            "route_not_found",
            request_id=get_request_id(),
            method=request.method,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=404,
            content={
                "error": "ROUTE_NOT_FOUND",
                "message": "Route not found. Check the client URL.",
                "request_id": get_request_id(),
            },
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unhandled_exception",
            request_id=get_request_id(),
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "INTERNAL_ERROR",
                "message": "An unexpected error occurred.",
                "request_id": get_request_id(),
            },
        )
