"""Domain errors and their HTTP status mapping.

Services raise these; ``app.main`` renders every one of them as
``{"error": message}`` with ``status_code``.
"""


class StudioError(Exception):
    status_code = 500
    default_message = "Something went wrong!"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(StudioError):
    status_code = 400
    default_message = "Invalid request"


class AuthenticationError(StudioError):
    status_code = 401
    default_message = "Not authenticated"


class AuthorizationError(StudioError):
    status_code = 403
    default_message = "Access denied"


class TimeWindowError(AuthorizationError):
    default_message = "Bookings can only be changed within 1 hour of creation"


class StatusLockError(AuthorizationError):
    default_message = "Confirmed or completed bookings can no longer be edited"


class NotFoundError(StudioError):
    status_code = 404
    default_message = "Not found"


class ConflictError(StudioError):
    # No distinct 409 is exposed; conflicts are reported as bad requests
    status_code = 400
    default_message = "Conflict"


class CapacityError(ConflictError):
    default_message = "Selection limit reached"


class StoreError(StudioError):
    status_code = 500
