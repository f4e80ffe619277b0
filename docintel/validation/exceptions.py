class ValidationError(Exception):
    """Base exception for uploads rejected before any external call."""


class EmptyFileError(ValidationError):
    pass


class TooLargeError(ValidationError):
    pass


class UnsupportedFormatError(ValidationError):
    pass
