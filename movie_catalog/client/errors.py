"""Errors raised by CatalogClient, one per HTTP failure class the API returns."""


class ApiError(Exception):
    """Raised when the API answers with a non-success status or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class BadRequestError(ApiError):
    """400: validation failure, duplicate account, bad search/sort parameters."""


class UnauthorizedError(ApiError):
    """401: bad credentials or a missing/invalid/expired token. The session has been cleared."""


class ForbiddenError(ApiError):
    """403: the token is valid but its role is not allowed to do this."""


class NotFoundError(ApiError):
    """404: unknown movie id."""


_BY_STATUS: dict[int, type[ApiError]] = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
}


def error_for_status(status_code: int, message: str) -> ApiError:
    return _BY_STATUS.get(status_code, ApiError)(message, status_code)
