"""
Error taxonomy shared by services and routes.

Services raise these; the handlers registered in ``app.main`` turn them into
``{"message": ...}`` JSON responses with the class's status code.
"""


class BookingAppError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookingAppError):
    """Missing or malformed input."""
    status_code = 400


class NotFoundError(BookingAppError):
    status_code = 404


class AuthorizationError(BookingAppError):
    """No session, or the session's role may not perform the operation."""
    status_code = 401


class PersistenceError(BookingAppError):
    """The database call failed. The message is safe to show to clients."""
    status_code = 500


class DomainConflictError(BookingAppError):
    """The request is well-formed but breaks a business rule."""
    status_code = 400
