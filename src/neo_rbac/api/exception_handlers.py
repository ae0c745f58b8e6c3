"""
Exception handlers rendering every error in the service's JSON envelope:
``{success, data, message, error, statusCode, path, timestamp}``.
"""
from http import HTTPStatus
from typing import Dict, Any, Optional, Callable
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..exceptions import NeoException
from ..models.base import utc_now

logger = logging.getLogger(__name__)


def _status_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def default_response_formatter(
    request: Request,
    status_code: int,
    message: str,
    details: Optional[Any] = None
) -> Dict[str, Any]:
    """Build the error envelope."""
    body = {
        "success": False,
        "data": None,
        "message": message,
        "error": _status_phrase(status_code),
        "statusCode": status_code,
        "path": request.url.path,
        "timestamp": utc_now().isoformat(),
    }
    if details:
        body["details"] = details
    return body


class ExceptionHandlerRegistry:
    """Registry for the application's exception handlers."""
    
    def __init__(
        self,
        response_formatter: Optional[Callable[..., Dict[str, Any]]] = None,
        is_production: bool = True
    ):
        """
        Args:
            response_formatter: Function building the error body
            is_production: Hide unexpected error messages when True
        """
        self.response_formatter = response_formatter or default_response_formatter
        self.is_production = is_production
    
    def _respond(
        self,
        request: Request,
        status_code: int,
        message: str,
        details: Optional[Any] = None
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status_code,
            content=self.response_formatter(request, status_code, message, details)
        )
    
    def register_handlers(self, app: FastAPI) -> None:
        """Register exception handlers for the application."""
        
        @app.exception_handler(NeoException)
        async def neo_exception_handler(request: Request, exc: NeoException):
            """Handle domain exceptions."""
            if exc.status_code >= 500:
                logger.error(f"{exc.code} on {request.url.path}: {exc.message}")
                message = "Internal server error" if self.is_production else exc.message
                return self._respond(request, exc.status_code, message)
            return self._respond(request, exc.status_code, exc.message, exc.details or None)
        
        @app.exception_handler(RequestValidationError)
        async def validation_exception_handler(request: Request, exc: RequestValidationError):
            """Handle request validation failures."""
            errors = [
                {
                    "field": ".".join(str(part) for part in error.get("loc", ())),
                    "message": error.get("msg"),
                }
                for error in exc.errors()
            ]
            return self._respond(request, status.HTTP_400_BAD_REQUEST, "Validation failed", errors)
        
        @app.exception_handler(StarletteHTTPException)
        async def http_exception_handler(request: Request, exc: StarletteHTTPException):
            """Handle framework HTTP errors such as unknown routes."""
            return self._respond(request, exc.status_code, str(exc.detail))
        
        @app.exception_handler(Exception)
        async def general_exception_handler(request: Request, exc: Exception):
            """Handle unexpected exceptions."""
            logger.error(f"Unhandled exception: {exc}", exc_info=True)
            
            if self.is_production:
                message = "An unexpected error occurred"
            else:
                message = str(exc)
            
            return self._respond(request, status.HTTP_500_INTERNAL_SERVER_ERROR, message)


def register_exception_handlers(
    app: FastAPI,
    response_formatter: Optional[Callable[..., Dict[str, Any]]] = None,
    is_production: bool = True
) -> None:
    """Create an ExceptionHandlerRegistry and register its handlers in one call."""
    registry = ExceptionHandlerRegistry(response_formatter, is_production)
    registry.register_handlers(app)
