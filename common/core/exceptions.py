class AppException(Exception):
    """Base application exception."""

    pass


class ValidationError(AppException):
    """Validation error exception."""

    pass
