"""Waitlist Core FastAPI application.

This service ranks a fixed population of waitlisted patients by how likely they
are to accept an offer for a slot at a given location, and returns the top
candidates.  Patient records are read-only; the service never writes them.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from waitlist_core.core.config import settings
from waitlist_core.routers import patients
from waitlist_core.schemas.patient import ErrorBody, ErrorResponse

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str, details: list | None = None) -> JSONResponse:
    body = ErrorResponse(error=ErrorBody(message=message, status_code=status_code, details=details))
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body.model_dump(by_alias=True, exclude_none=True)),
    )


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    logger.warning("Validation error path=%s details=%s", request.url.path, details)
    return error_response(status.HTTP_400_BAD_REQUEST, "Validation error", details=details)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Waitlist Core",
        version="0.1.0",
        description="Ranks waitlisted patients by likelihood of accepting an offer near a location.",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET"],
        allow_headers=["Accept", "Content-Type"],
    )

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)

    app.include_router(patients.router)

    return app


app = create_app()
