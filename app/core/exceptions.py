"""Domain errors raised by services and rendered by the API exception handler."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse


class HyNexusError(Exception):
    """Base class for errors surfaced to the client with a fixed HTTP status."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConflictError(HyNexusError):
    """Duplicate email or username, or an account that cannot be linked."""

    status_code = status.HTTP_409_CONFLICT


class UnauthorizedError(HyNexusError):
    """Bad credentials, unusable account, or an invalid refresh token."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(HyNexusError):
    """Authenticated but missing a required role, permission or the admin flag."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(HyNexusError):
    """Resource lookup by id or slug found nothing."""

    status_code = status.HTTP_404_NOT_FOUND


async def hynexus_error_handler(request: Request, exc: HyNexusError) -> JSONResponse:
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=headers,
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Render every HyNexusError as {"detail": message} with its status code."""
    app.add_exception_handler(HyNexusError, hynexus_error_handler)
