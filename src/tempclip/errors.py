class ClipValidationError(ValueError):
    """Raised when a clip cannot be created from the given input."""
