"""Failure kinds of a single NTP exchange.

All of these are caught by NtpQuery and turned into a local-clock fallback result;
they only reach callers through ``QueryResult.failure``.
"""
import ntplib


class NtpError(ntplib.NTPException):
    """Base class for every classified NTP exchange failure."""


class ResolutionFailure(NtpError):
    """The server hostname could not be resolved."""


class NetworkFailure(NtpError):
    """Sending or receiving failed (includes connection refused)."""


class TimeoutExceeded(NtpError):
    """No reply arrived within the timeout."""


class MalformedReply(NtpError):
    """The reply is too short or otherwise cannot be parsed."""
