"""errors.py — Exception types shared by the studio core."""


class StudioError(Exception):
    """Base class for studio errors."""


class ConfigUnavailable(StudioError):
    """The project configuration is missing or could not be confirmed."""

    def __init__(self, message="tideorm.toml not found"):
        super().__init__(message)


class MissingRequiredField(StudioError):
    """An action was attempted without a required identifier."""

    def __init__(self, field, title, body):
        self.field = field
        self.title = title
        self.body = body
        super().__init__(f"{field} is required")


class ConnectionFailure(StudioError):
    """The backend could not be reached or sent an unusable response."""
