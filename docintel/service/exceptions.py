class InvalidRequestError(Exception):
    """Raised when a boundary request is malformed or names an unknown action."""
