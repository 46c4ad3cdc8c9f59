class TripStoreError(Exception):
    """Trip store call failed (network error, 4xx/5xx, malformed response)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TripNotFoundError(TripStoreError):
    """Requested trip or activity does not exist in the store."""
