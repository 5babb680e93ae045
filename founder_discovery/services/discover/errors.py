"""Error types for the discover pipeline."""


class InvalidDiscoverRequest(Exception):
    """Client error (HTTP 400): a required field is missing or invalid."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class CandidateRetrievalError(Exception):
    """Raised when no query term could be embedded, leaving nothing to rank against."""
