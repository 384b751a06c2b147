import functools

from dairyops.utils.logging import get_logger

logger = get_logger(__name__)


class FarmError(Exception):
    """Base class for failures the API reports to the caller as-is."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(FarmError):
    status_code = 404


class InvalidArgumentError(FarmError):
    status_code = 400


class ConflictError(FarmError):
    status_code = 409


class AuthenticationError(FarmError):
    status_code = 401


class PermissionDeniedError(FarmError):
    status_code = 403


class InternalError(FarmError):
    status_code = 500

    def __init__(self, message: str = "Something went wrong"):
        super().__init__(message)


def service_boundary(func):
    """
    Wrap a public service operation.

    FarmError subclasses pass through untouched. Anything else is logged and
    re-raised as InternalError so callers never see a raw driver exception.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except FarmError:
            raise
        except Exception as e:
            logger.error(f"Error in {func.__name__}: {e}")
            raise InternalError() from e

    return wrapper
