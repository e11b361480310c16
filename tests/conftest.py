import socket
import struct
import threading

import pytest


def build_reply(seconds: int, fraction: int, size: int = 48) -> bytes:
    """Server reply with the given transmit timestamp; other fields are filler."""
    buf = bytearray(size)
    buf[0] = (0 << 6) | (3 << 3) | 4  # server mode
    buf[1] = 2
    # non-zero reference/receive fields must not affect decoding
    struct.pack_into("!II", buf, 16, 0xDEADBEEF, 0x01020304)
    struct.pack_into("!II", buf, 32, 0xCAFEBABE, 0x0A0B0C0D)
    struct.pack_into("!II", buf, 40, seconds, fraction)
    return bytes(buf)


class MockNtpServer(threading.Thread):
    """UDP server on localhost answering every datagram with a fixed reply (None = stay silent)."""

    def __init__(self, reply=None):
        super().__init__(daemon=True)
        self.reply = reply
        self.requests = []
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.sock.bind(("127.0.0.1", 0))
        self.sock.settimeout(0.05)
        self.port = self.sock.getsockname()[1]
        self._stop_evt = threading.Event()

    def run(self):
        while not self._stop_evt.is_set():
            try:
                data, addr = self.sock.recvfrom(1024)
            except socket.timeout:
                continue
            except OSError:
                break
            self.requests.append(data)
            if self.reply is not None:
                self.sock.sendto(self.reply, addr)

    def stop(self):
        self._stop_evt.set()
        self.join(timeout=1.0)
        self.sock.close()


@pytest.fixture
def ntp_server():
    """Factory fixture: ntp_server(reply) starts a mock server and returns it."""
    servers = []

    def _start(reply=None):
        srv = MockNtpServer(reply)
        srv.start()
        servers.append(srv)
        return srv

    yield _start
    for srv in servers:
        srv.stop()
