"""NTP client-mode packet encoding and transmit-timestamp decoding (RFC 5905 subset)."""
import struct
from datetime import datetime, timedelta, timezone

from .errors import MalformedReply

PACKET_SIZE = 48

LEAP_NO_WARNING = 0
VERSION = 3
MODE_CLIENT = 3

NTP_EPOCH = datetime(1900, 1, 1, tzinfo=timezone.utc)

# transmit timestamp: 32-bit seconds + 32-bit fraction, big-endian
_TX_OFFSET = 40
_TX_FORMAT = "!II"


def encode() -> bytes:
    """Return the 48-byte client request.

    Byte 0 carries LI=0, VN=3, Mode=3 (0x1B); everything else is zero.
    """
    pkt = bytearray(PACKET_SIZE)
    pkt[0] = (LEAP_NO_WARNING << 6) | (VERSION << 3) | MODE_CLIENT
    return bytes(pkt)


def to_milliseconds(seconds: int, fraction: int) -> int:
    """Milliseconds since the NTP epoch, fraction rounded down."""
    return seconds * 1000 + (fraction * 1000) // 2 ** 32


def decode(buffer: bytes) -> datetime:
    """Decode the transmit timestamp of a server reply into an aware UTC datetime.

    Only bytes 40-47 are read. Raises MalformedReply when the buffer is shorter
    than a full packet.
    """
    if buffer is None or len(buffer) < PACKET_SIZE:
        size = 0 if buffer is None else len(buffer)
        raise MalformedReply(f"NTP reply too short ({size} bytes, expected {PACKET_SIZE})")
    try:
        seconds, fraction = struct.unpack_from(_TX_FORMAT, buffer, _TX_OFFSET)
    except (struct.error, TypeError) as e:
        raise MalformedReply(f"NTP reply cannot be unpacked: {e}") from e
    return NTP_EPOCH + timedelta(milliseconds=to_milliseconds(seconds, fraction))
