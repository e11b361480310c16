"""Caller-facing real-time clock backed by an NTP server."""
from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Dict, Optional, Union

from .config import DEFAULTS, load_config
from .ntp.query import DEFAULT_TIMEOUT_S, NTP_PORT, NtpQuery, QueryResult

logger = logging.getLogger(__name__)

DEFAULT_NTP_SERVER = "pool.ntp.org"


class RealTime:
    """
    Real time from an NTP server, with local-clock fallback.

    Every call performs one fresh exchange and returns its own QueryResult;
    nothing about the last answer is kept on the object, so a RealTime can be
    shared between threads.

    Contract:
      - network problems never raise; the result then carries the local UTC
        time with ``reliable=False``
      - callers that care about trust must check ``result.reliable``
    """

    def __init__(
        self,
        server: str = DEFAULT_NTP_SERVER,
        timeout: float = DEFAULT_TIMEOUT_S,
        port: int = NTP_PORT,
    ):
        if not server or not str(server).strip():
            raise ValueError("server must be a non-empty hostname")
        timeout = float(timeout)
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self._server = str(server).strip()
        self.timeout = timeout
        self._query = NtpQuery(port=port)

    @classmethod
    def from_config(cls, cfg: Optional[Dict] = None) -> "RealTime":
        """Build from a config dict (``load_config()`` when omitted)."""
        if cfg is None:
            cfg = load_config()
        merged = dict(DEFAULTS)
        merged.update({k: v for k, v in cfg.items() if k in DEFAULTS and v is not None})
        logger.debug("RealTime: configured for %s", merged["ntp_server"])
        return cls(
            server=merged["ntp_server"],
            timeout=merged["ntp_timeout_s"],
            port=merged["ntp_port"],
        )

    @property
    def server(self) -> str:
        """Hostname of the NTP server used to get the real time."""
        return self._server

    @property
    def port(self) -> int:
        return self._query.port

    def query(self) -> QueryResult:
        return self._query.fetch(self._server, timeout=self.timeout)

    @property
    def now(self) -> QueryResult:
        """UTC time from the server (queries on every access)."""
        return self.query()

    def now_in_time_zone(self, tz: Union[str, tzinfo]) -> QueryResult:
        return self.query().in_time_zone(tz)

    def now_in_my_time_zone(self) -> QueryResult:
        """Query once and convert to the system's local time zone."""
        result = self.query()
        local_tz = result.timestamp.astimezone().tzinfo
        return result.in_time_zone(local_tz)

    def __repr__(self) -> str:
        return f"RealTime(server={self._server!r}, timeout={self.timeout}, port={self.port})"
