"""API error taxonomy.

Every failure a client can observe is an ``ApiError`` subclass with a stable
``code``, an HTTP status and a user-facing message. ``register_error_handlers``
renders them as ``{"message": ..., "error": ...}``.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
    code = 'InternalError'
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = 'Internal server error.'

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def to_dict(self) -> dict:
        return {'message': self.message, 'error': self.code}


class MissingFields(ApiError):
    code = 'MissingFields'
    status_code = status.HTTP_400_BAD_REQUEST
    message = 'All fields are required.'


class InvalidDomain(ApiError):
    code = 'InvalidDomain'
    status_code = status.HTTP_400_BAD_REQUEST
    message = 'Registration is only allowed for institutional email addresses.'


class MissingStudentIdInEmail(ApiError):
    code = 'MissingStudentIdInEmail'
    status_code = status.HTTP_400_BAD_REQUEST
    message = 'Invalid institutional email format. It must contain the student ID.'


class StudentIdMismatch(ApiError):
    code = 'StudentIdMismatch'
    status_code = status.HTTP_400_BAD_REQUEST
    message = 'The student ID does not match the digits in your institutional email.'


class DuplicateUser(ApiError):
    code = 'DuplicateUser'
    status_code = status.HTTP_400_BAD_REQUEST
    message = 'The email or student ID is already registered.'


class InvalidCredentials(ApiError):
    code = 'InvalidCredentials'
    status_code = status.HTTP_401_UNAUTHORIZED
    message = 'Invalid credentials.'


class MissingToken(ApiError):
    code = 'MissingToken'
    status_code = status.HTTP_401_UNAUTHORIZED
    message = 'Not authorized, no token found.'


class InvalidToken(ApiError):
    code = 'InvalidToken'
    status_code = status.HTTP_401_UNAUTHORIZED
    message = 'Not authorized, token failed or expired.'


class Forbidden(ApiError):
    code = 'Forbidden'
    status_code = status.HTTP_403_FORBIDDEN
    message = 'Access denied.'


class InvalidStatus(ApiError):
    code = 'InvalidStatus'
    status_code = status.HTTP_400_BAD_REQUEST
    message = 'Invalid order status.'


class InvalidStatusTransition(ApiError):
    code = 'InvalidStatusTransition'
    status_code = status.HTTP_409_CONFLICT
    message = 'The order cannot move to that status from its current status.'


class OrderNotFound(ApiError):
    code = 'OrderNotFound'
    status_code = status.HTTP_404_NOT_FOUND
    message = 'Order not found.'


class InvalidRequest(ApiError):
    code = 'InvalidRequest'
    status_code = status.HTTP_400_BAD_REQUEST
    message = 'The request body is malformed or has fields of the wrong type.'


class InternalError(ApiError):
    pass


async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {'WWW-Authenticate': 'Bearer'}
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    # An absent body or absent field counts as missing; anything else is a type error.
    if any(error.get('type') == 'missing' for error in exc.errors()):
        error = MissingFields()
    else:
        error = InvalidRequest()
    logger.info('Rejected %s %s: %s', request.method, request.url.path, error.code)
    return await handle_api_error(request, error)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception('Unhandled error on %s %s', request.method, request.url.path)
    return await handle_api_error(request, InternalError())


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, handle_api_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
