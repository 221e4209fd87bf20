class QueryError(Exception):
    """Base exception for queries against a loaded network."""


class UnknownTripError(QueryError):
    """Raised when a trip code is not part of the network."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Unknown trip code {code!r}")
