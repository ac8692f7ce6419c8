"""Errors raised by the catalogue layer."""


class StoreQueryError(Exception):
    """A relational store call failed (connection, malformed filter, permission).

    Carries the message and the HTTP status the API should answer with.
    """

    def __init__(self, message: str, status_code: int = 500) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
