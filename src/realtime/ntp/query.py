"""Single-shot NTP query with local-clock fallback.

``fetch`` never raises for network problems: any failure is classified, logged, and
returned as an unreliable result carrying the local UTC time. Callers that need to
know whether the time came from the server must check ``QueryResult.reliable``.
"""
from __future__ import annotations

import logging
import socket
from dataclasses import dataclass, replace
from datetime import datetime, timezone, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo

from . import packet
from .errors import NetworkFailure, NtpError, ResolutionFailure, TimeoutExceeded

logger = logging.getLogger(__name__)

NTP_PORT = 123
DEFAULT_TIMEOUT_S = 3.0

# room for extension fields; only the first 48 bytes are used
_RECV_BUFSIZE = 1024


def _as_tzinfo(tz: Union[str, tzinfo]) -> tzinfo:
    if isinstance(tz, str):
        return ZoneInfo(tz)
    return tz


@dataclass(frozen=True)
class QueryResult:
    """Outcome of one query.

    timestamp: aware datetime (UTC unless converted with ``in_time_zone``)
    reliable:  True only when the timestamp was decoded from a server reply
    failure:   the classified error when the local clock was used instead
    """

    timestamp: datetime
    reliable: bool
    failure: Optional[NtpError] = None

    def in_time_zone(self, tz: Union[str, tzinfo]) -> "QueryResult":
        """Return a copy with the timestamp converted to ``tz`` (IANA key or tzinfo)."""
        return replace(self, timestamp=self.timestamp.astimezone(_as_tzinfo(tz)))


class NtpQuery:
    """Performs request/response exchanges against NTP servers.

    Holds no per-call state, so one instance can be shared between threads.
    """

    def __init__(self, port: int = NTP_PORT):
        self.port = int(port)

    def fetch(self, hostname: str, timeout: float = DEFAULT_TIMEOUT_S) -> QueryResult:
        if not hostname or not str(hostname).strip():
            raise ValueError("hostname must be a non-empty string")
        timeout = float(timeout)
        if timeout <= 0:
            raise ValueError("timeout must be positive")

        try:
            ts = self._exchange(str(hostname).strip(), timeout)
        except NtpError as e:
            logger.warning(
                "NtpQuery: %s from %s, falling back to local clock: %s",
                type(e).__name__,
                hostname,
                e,
            )
            return QueryResult(timestamp=datetime.now(timezone.utc), reliable=False, failure=e)

        logger.debug("NtpQuery: %s -> %s", hostname, ts.isoformat())
        return QueryResult(timestamp=ts, reliable=True)

    def _resolve(self, hostname: str):
        logger.debug("NtpQuery: resolving %s", hostname)
        try:
            infos = socket.getaddrinfo(hostname, self.port, type=socket.SOCK_DGRAM)
        except (socket.gaierror, UnicodeError) as e:
            raise ResolutionFailure(f"cannot resolve {hostname!r}: {e}") from e
        if not infos:
            raise ResolutionFailure(f"no addresses for {hostname!r}")
        family, _, _, _, sockaddr = infos[0]
        return family, sockaddr

    def _exchange(self, hostname: str, timeout: float) -> datetime:
        family, sockaddr = self._resolve(hostname)

        logger.debug("NtpQuery: exchanging with %s:%s", sockaddr[0], sockaddr[1])
        try:
            with socket.socket(family, socket.SOCK_DGRAM) as s:
                s.settimeout(timeout)
                s.connect(sockaddr)
                s.send(packet.encode())
                data = s.recv(_RECV_BUFSIZE)
        except socket.timeout as e:
            raise TimeoutExceeded(f"no reply from {sockaddr[0]} within {timeout:.3f}s") from e
        except OSError as e:
            raise NetworkFailure(f"exchange with {sockaddr[0]} failed: {e}") from e

        logger.debug("NtpQuery: decoding %d byte reply", len(data))
        return packet.decode(data)


def fetch(hostname: str, timeout: float = DEFAULT_TIMEOUT_S, port: int = NTP_PORT) -> QueryResult:
    """Query ``hostname`` once; see NtpQuery.fetch."""
    return NtpQuery(port=port).fetch(hostname, timeout=timeout)
