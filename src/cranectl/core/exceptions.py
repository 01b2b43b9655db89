class CraneCtlError(Exception):
    """Base exception for cranectl."""

    pass


class NotFoundError(CraneCtlError):
    """Raised when a named recommendation or its target does not exist."""

    pass


class AlreadyExistsError(CraneCtlError):
    """Raised when creating an object whose name is already taken."""

    pass


class MalformedPayloadError(CraneCtlError):
    """Raised when a recommendation payload cannot be decoded."""

    pass


class UnsupportedTypeError(CraneCtlError):
    """Raised when a recommendation type cannot be adopted."""

    pass


class UnresolvableTargetError(CraneCtlError):
    """Raised when a target kind/apiVersion has no known REST mapping."""

    pass


class PatchFailedError(CraneCtlError):
    """Raised when the API server rejects a mutation."""

    def __init__(self, message: str, cause: Exception = None):
        super().__init__(message)
        self.cause = cause
