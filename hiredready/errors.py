class AppError(Exception):
    """Base error carrying an HTTP status and a message that is safe to show the client."""

    status_code = 500
    default_message = "Server Error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(AppError):
    status_code = 400
    default_message = "Invalid input"


class Unauthorized(AppError):
    status_code = 401
    default_message = "Not authorized"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class UpstreamFormatError(AppError):
    """The AI service answered, but not with the JSON shape we asked for."""

    status_code = 500
    default_message = "AI service returned an invalid format"


class UpstreamServiceError(AppError):
    """The AI service could not be reached or rejected the request."""

    status_code = 500
    default_message = "AI service request failed"


class ServerError(AppError):
    status_code = 500
