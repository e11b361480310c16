"""Minimal NTP client: packet codec and single-shot query"""

from .errors import MalformedReply, NetworkFailure, NtpError, ResolutionFailure, TimeoutExceeded
from .query import DEFAULT_TIMEOUT_S, NTP_PORT, NtpQuery, QueryResult, fetch

__all__ = [
    "NtpQuery",
    "QueryResult",
    "fetch",
    "NTP_PORT",
    "DEFAULT_TIMEOUT_S",
    "NtpError",
    "ResolutionFailure",
    "NetworkFailure",
    "TimeoutExceeded",
    "MalformedReply",
]
