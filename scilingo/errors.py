"""
Error taxonomy shared by services and request handlers
"""

GENERIC_MESSAGE = 'Something went wrong.'


class ScilingoError(Exception):
    """Base error carrying the HTTP status a handler should answer with"""
    status_code = 500
    expose_message = True

    def __init__(self, message: str = None, status_code: int = None):
        super().__init__(message or GENERIC_MESSAGE)
        self.message = message or GENERIC_MESSAGE
        if status_code is not None:
            self.status_code = status_code

    @property
    def public_message(self) -> str:
        """Message safe to show to the user"""
        return self.message if self.expose_message else GENERIC_MESSAGE


class AuthenticationError(ScilingoError):
    status_code = 401

    def __init__(self, message: str = 'Not authenticated'):
        super().__init__(message)


class AuthorizationError(ScilingoError):
    status_code = 403


class ValidationError(ScilingoError):
    status_code = 400


class NotFoundError(ScilingoError):
    status_code = 404


class PreconditionError(ScilingoError):
    status_code = 409


class LessonFormatError(ValidationError):
    """The completion API answered with something that is not a lesson"""
    status_code = 502


class PersistenceError(ScilingoError):
    status_code = 500
    expose_message = False


class ServiceUnavailableError(ScilingoError):
    status_code = 503
    expose_message = False
