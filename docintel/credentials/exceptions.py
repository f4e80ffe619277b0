from docintel.errors import ErrorCategory, ExternalServiceError


class CredentialError(ExternalServiceError):
    """Raised when an access token cannot be obtained.

    Fatal for every dependent operation until the configuration is fixed.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message, ErrorCategory.CREDENTIAL)
