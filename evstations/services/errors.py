from __future__ import annotations

from typing import Optional

from bson.errors import InvalidDocument, InvalidId
from pymongo.errors import ConnectionFailure, DuplicateKeyError, OperationFailure, PyMongoError

# Códigos de MongoDB: BadValue, TypeMismatch, DuplicateKey
_CAST_ERROR_CODES = {2, 14}
_DUPLICATE_KEY_CODE = 11000
_GEO_OPERATORS = ("$near", "$nearSphere", "$geoNear", "$geoWithin")


class StationServiceError(Exception):
    status_code = 500
    error_code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str, error_code: Optional[str] = None, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        self.cause = cause


class ClientInputError(StationServiceError):
    status_code = 400
    error_code = "INVALID_PARAMETERS"


class ServiceUnavailableError(StationServiceError):
    status_code = 503
    error_code = "DATABASE_CONNECTION_ERROR"


class ConflictError(StationServiceError):
    status_code = 409
    error_code = "DUPLICATE_ENTRY"


class InternalError(StationServiceError):
    status_code = 500
    error_code = "INTERNAL_SERVER_ERROR"


def _is_cast_failure(exc: BaseException) -> bool:
    if isinstance(exc, (InvalidId, InvalidDocument)):
        return True
    return isinstance(exc, OperationFailure) and exc.code in _CAST_ERROR_CODES


def _is_duplicate(exc: BaseException) -> bool:
    if isinstance(exc, DuplicateKeyError):
        return True
    return isinstance(exc, PyMongoError) and getattr(exc, "code", None) == _DUPLICATE_KEY_CODE


def classify_store_error(exc: BaseException) -> StationServiceError:
    """Mapea un fallo del almacén a la taxonomía de errores (la primera coincidencia gana)."""
    if isinstance(exc, StationServiceError):
        return exc
    if _is_cast_failure(exc):
        return ClientInputError("Invalid query parameters provided", "INVALID_PARAMETERS", exc)
    if isinstance(exc, ConnectionFailure):
        return ServiceUnavailableError("Database connection error. Please try again later.", cause=exc)
    if _is_duplicate(exc):
        return ConflictError("Duplicate entry found", cause=exc)
    if any(op in str(exc) for op in _GEO_OPERATORS):
        return ClientInputError("Invalid location coordinates provided", "INVALID_COORDINATES", exc)
    return InternalError("An unexpected error occurred while fetching charging stations", cause=exc)


def error_payload(err: StationServiceError, expose_details: bool) -> dict:
    body = {"success": False, "message": err.message, "error": err.error_code}
    if expose_details and isinstance(err, InternalError) and err.cause is not None:
        body["details"] = str(err.cause)
    return body
