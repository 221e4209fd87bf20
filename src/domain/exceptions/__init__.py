from .network import InvalidScheduleError, NetworkModelError, UnresolvedReferenceError
from .query import QueryError, UnknownTripError

__all__ = [
    "InvalidScheduleError",
    "NetworkModelError",
    "QueryError",
    "UnknownTripError",
    "UnresolvedReferenceError",
]
