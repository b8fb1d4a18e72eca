"""Error types shared across the booking store and availability layers."""

from __future__ import annotations


class BookingStoreError(Exception):
    """The booking store could not be queried (network, auth, bad response)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
