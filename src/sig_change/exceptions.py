class UnrecoverableError(ValueError):
    """Base class for all unrecoverable errors in the significant change check."""

    pass


class InvalidPayloadError(UnrecoverableError):
    """Raised when a webhook body or its headers cannot be interpreted."""

    pass
