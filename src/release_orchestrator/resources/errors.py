"""
release_orchestrator.resources.errors

Semantic error taxonomy for resource store calls.

Responsibilities:
- Define the errors orchestration logic branches on.
- Map transport failures (HTTP status codes) onto that taxonomy.
"""

from __future__ import annotations

import httpx


class ResourceError(Exception):
    """
    Base class for classified resource store failures.
    """

    status_code: int | None = None

    def __init__(self, message: str = "", *, status_code: int | None = None) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class BadRequestError(ResourceError):
    status_code = 400


class UnauthorisedError(ResourceError):
    status_code = 401


class ObjectDoesNotExistError(ResourceError):
    # Also raised by the store when a creation would violate a uniqueness constraint
    # that the caller cannot read back.
    status_code = 404


class ServerError(ResourceError):
    status_code = 500


class HttpResponseError(ResourceError):
    def __init__(self, message: str = "", *, status_code: int) -> None:
        super().__init__(message, status_code=status_code)


_BY_STATUS: dict[int, type[ResourceError]] = {
    400: BadRequestError,
    401: UnauthorisedError,
    404: ObjectDoesNotExistError,
    500: ServerError,
}


def status_code_of(exc: BaseException) -> int | None:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code
    code = getattr(exc, "status_code", None)
    return code if isinstance(code, int) else None


def classify_response_error(exc: Exception) -> Exception:
    """
    Return the semantic error for a failed call.

    Failures without a status code (network faults, programming errors) are returned
    unchanged so the caller re-raises the original exception.
    """

    if isinstance(exc, ResourceError):
        return exc

    code = status_code_of(exc)
    if not code:
        return exc

    cls = _BY_STATUS.get(code)
    if cls is None:
        err: ResourceError = HttpResponseError(str(exc), status_code=code)
    else:
        err = cls(str(exc))
    err.__cause__ = exc
    return err


# --- Module Notes -----------------------------------------------------------
# A 404 on creation means "conflict" for this store. `operations.get_or_create`
# depends on that mapping; do not introduce a separate conflict error.
