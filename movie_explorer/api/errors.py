# movie_explorer/api/errors.py

import logging
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


def validation_message(errors) -> str:
    """First validation error as "field: message"."""
    if not errors:
        return "Invalid request"
    error = errors[0]
    location = [str(part) for part in error.get("loc", ()) if part not in ("query", "body")]
    message = error.get("msg", "Invalid value")
    if location:
        return f"{'.'.join(location)}: {message}"
    return message


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = validation_message(exc.errors())
    logger.warning("Invalid request parameters: %s", message)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": message})
