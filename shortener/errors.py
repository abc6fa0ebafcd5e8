# errors.py
# Every failure the handler can report, tagged with a kind.
# The boundary in handler.py turns these into gateway responses.

LEGACY_STATUS_CODE = 404


class ShortenerError(Exception):
    kind = "error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DecodeError(ShortenerError):
    """Request body is not a JSON object of the form {"url": "..."}."""

    kind = "decode"
    status_code = 400


class StoreLookupError(ShortenerError):
    """Scanning the table for an existing mapping failed."""

    kind = "lookup"
    status_code = 502


class IntegrityError(ShortenerError):
    """More than one stored record maps the same long URL."""

    kind = "integrity"
    status_code = 409


class StoreWriteError(ShortenerError):
    """Writing a new mapping failed."""

    kind = "write"
    status_code = 502


def status_for(error: ShortenerError, mode: str) -> int:
    if mode == "legacy":
        return LEGACY_STATUS_CODE
    return error.status_code
