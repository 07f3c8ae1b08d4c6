"""
Application error kinds.

Raised by the CRUD layer and dependencies, and converted to JSON responses
by the exception handlers registered in main.py.
"""


class JoblyError(Exception):
    """Base error carrying a message and the HTTP status it maps to"""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(JoblyError):
    """Caller-supplied data is malformed, empty, or inconsistent"""
    status_code = 400


class NotFoundError(JoblyError):
    """Lookup, update, or delete target does not exist"""
    status_code = 404


class UnauthorizedError(JoblyError):
    """Missing or insufficient credentials"""
    status_code = 401


def format_validation_errors(errors) -> str:
    """Flatten Pydantic error dicts into a single message."""
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'input'}: {err['msg']}"
        for err in errors
    )
