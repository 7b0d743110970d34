"""
Error Handlers Module

Turns domain errors into the ``{"success": false, "error": "..."}`` body used by
the analysis endpoint. CRUD endpoints keep raising HTTPException and are not
affected.
"""
import logging
from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException as StarletteHTTPException

from pulse.core.errors import PulseError

logger = logging.getLogger(__name__)


def error_body(message: str) -> dict:
    return {"success": False, "error": message}


async def pulse_error_handler(request: Request, exc: PulseError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


class ErrorBodyRoute(APIRoute):
    """
    Route class that answers auth and request validation failures with
    ``error_body`` instead of FastAPI's ``{"detail": ...}``.

    Usage:
        router = APIRouter(route_class=ErrorBodyRoute)
    """

    def get_route_handler(self) -> Callable:
        original_route_handler = super().get_route_handler()

        async def error_body_route_handler(request: Request) -> Response:
            try:
                return await original_route_handler(request)
            except RequestValidationError:
                return JSONResponse(status_code=400, content=error_body("Invalid request body"))
            except StarletteHTTPException as e:
                return JSONResponse(
                    status_code=e.status_code,
                    content=error_body(str(e.detail)),
                    headers=e.headers,
                )

        return error_body_route_handler


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PulseError, pulse_error_handler)
