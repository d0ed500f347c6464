class UserFacingError(Exception):
    """Error safe to display in the UI."""


class ManifestError(UserFacingError):
    """The sample manifest could not be fetched or parsed."""


class InferenceError(UserFacingError):
    """The inference backend failed or returned a malformed response."""


class DecisionError(UserFacingError):
    """The output vector cannot be turned into a class decision."""


def friendly_error(message: str) -> str:
    return f"Error: {message}"
