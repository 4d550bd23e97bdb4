"""
Domain exceptions raised by services and repositories.

Routers translate them to HTTP responses with `to_http_exception`.
"""
from fastapi import HTTPException, status


class DomainError(Exception):
    """Base class for expected business-rule failures"""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(DomainError):
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(DomainError):
    status_code = status.HTTP_409_CONFLICT


class PreconditionFailedError(DomainError):
    status_code = status.HTTP_412_PRECONDITION_FAILED


class ExternalServiceError(DomainError):
    status_code = status.HTTP_502_BAD_GATEWAY


def to_http_exception(error: DomainError) -> HTTPException:
    """Map a domain error to the matching HTTPException"""
    return HTTPException(status_code=error.status_code, detail=error.message)
