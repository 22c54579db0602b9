"""Custom exception classes for the application."""


class AppError(Exception):
    """Base application error class."""

    def __init__(self, message, status_code=400):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ValidationError(AppError):
    """Raised when user input fails validation."""

    def __init__(self, message="Validation failed."):
        """Initialize the error."""
        super().__init__(message, 400)


class AuthenticationError(AppError):
    """Raised when a sync token is missing or does not match the club slug."""

    def __init__(self, message="Invalid or missing sync token."):
        """Initialize the error."""
        super().__init__(message, 401)


class ForbiddenError(AppError):
    """Raised when a request targets a resource outside the allow-list."""

    def __init__(self, message="Only FFE URLs are allowed."):
        """Initialize the error."""
        super().__init__(message, 403)


class NotFoundError(AppError):
    """Raised when a resource is not found."""

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class RateLimitError(AppError):
    """Raised when a client exceeds its request budget."""

    def __init__(self, message="Too many requests. Please try again later."):
        """Initialize the error."""
        super().__init__(message, 429)


class UpstreamError(AppError):
    """Raised when the federation site answers with an unusable response."""

    def __init__(self, message="Scraping failed.", upstream_status=None):
        """Initialize the error."""
        super().__init__(message, 500)
        self.upstream_status = upstream_status


class StorageError(AppError):
    """Raised when persisted data cannot be written."""

    def __init__(self, message="Failed to save data. Storage might be full."):
        """Initialize the error."""
        super().__init__(message, 500)


class NoClubsDetectedError(AppError):
    """Raised when a statistics page yields no club breakdown."""

    def __init__(
        self,
        message="No club detected. The tournament may not have started yet.",
    ):
        """Initialize the error."""
        super().__init__(message, 404)


class NoPlayersFoundError(AppError):
    """Raised when no player of the bound club appears in a results page."""

    def __init__(self, club_name):
        """Initialize the error."""
        super().__init__(
            f"No {club_name} player found. "
            "The tournament may not have started yet.",
            404,
        )
        self.club_name = club_name


def describe_error(error):
    """Return a stable, user-facing message for any raised error.

    Only ``AppError`` messages are written for users; anything else is an
    internal failure whose text is not shown.
    """
    if isinstance(error, AppError) and error.message:
        return error.message
    return "Unknown error"
