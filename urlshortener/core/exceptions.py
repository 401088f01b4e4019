"""Error taxonomy shared by the service layer and the HTTP surface."""

from typing import Optional


class ShortenerError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ShortenerError):
    """Malformed client input: bad URL or custom id length."""
    status_code = 400


class ConflictError(ShortenerError):
    """Requested custom id is already taken."""
    status_code = 409


class NotFoundError(ShortenerError):
    status_code = 404


class StoreError(ShortenerError):
    """Any failure raised by the record store backend.

    The message is meant for logs only. Clients get `client_message` when
    set, otherwise a generic description chosen by the HTTP layer.
    """
    status_code = 500

    def __init__(self, message: str, client_message: Optional[str] = None):
        super().__init__(message)
        self.client_message = client_message
