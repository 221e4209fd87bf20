class NetworkModelError(Exception):
    """Base exception for a dataset that cannot be turned into a network model."""


class UnresolvedReferenceError(NetworkModelError):
    """Raised when a stop or journey pattern code does not resolve."""

    def __init__(self, kind: str, code: str, referenced_by: str | None = None):
        self.kind = kind
        self.code = code
        self.referenced_by = referenced_by
        msg = f"Unknown {kind} code {code!r}"
        if referenced_by:
            msg += f" (referenced by {referenced_by!r})"
        super().__init__(msg)


class InvalidScheduleError(NetworkModelError):
    """Raised when a time or distance sequence cannot be interpolated."""

    def __init__(self, code: str, reason: str):
        self.code = code
        self.reason = reason
        super().__init__(f"Invalid schedule for {code!r}: {reason}")
