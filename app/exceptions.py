"""
Domain errors raised by the service layer

Each error carries a stable kind and the HTTP status it maps to. The
exception handler in app.main renders them as JSON.
"""


class QuizServiceError(Exception):
    """Base class for errors reported back to the caller"""

    error = "quiz_service_error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {
            "error": self.error,
            "message": self.message,
            "status_code": self.status_code,
        }


class ValidationError(QuizServiceError):
    """Malformed or inconsistent input"""

    error = "validation_error"
    status_code = 400


class NotFoundError(QuizServiceError):
    """No such quiz, question or attempt"""

    error = "not_found"
    status_code = 404


class ConflictError(QuizServiceError):
    """Duplicate in-progress attempt, attempt limit reached, quiz closed"""

    error = "conflict"
    status_code = 409


class InvalidStateError(QuizServiceError):
    """Operation not allowed in the attempt's current state"""

    error = "invalid_state"
    status_code = 409
