"""Exceptions raised by the metrics layer."""


class MissingAddressError(ValueError):
    """Raised when a wallet address is required but absent."""

    def __init__(self, message: str = "Address is required"):
        super().__init__(message)
