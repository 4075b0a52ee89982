"""Minimal SNTP client keeping the time of day from an NTP server."""

from __future__ import annotations

import random
import socket
import struct
import time
from typing import Callable, Optional

SEVENTY_YEARS = 2208988800
NTP_PACKET_SIZE = 48
NTP_DEFAULT_LOCAL_PORT = 1337
NTP_SERVER_PORT = 123
DEFAULT_POOL_SERVER = "pool.ntp.org"
DEFAULT_UPDATE_INTERVAL = 3600000

_UINT32 = 0xFFFFFFFF
_POLL_INTERVAL = 0.01
_MAX_POLLS = 100


def _default_millis() -> int:
    return int(time.monotonic() * 1000)


def _default_socket() -> socket.socket:
    return socket.socket(socket.AF_INET, socket.SOCK_DGRAM)


def build_ntp_request() -> bytes:
    """The 48-byte client request sent to the server."""
    packet = bytearray(NTP_PACKET_SIZE)
    packet[0] = 0b11100011  # LI, version, mode
    packet[1] = 0  # stratum
    packet[2] = 6  # polling interval
    packet[3] = 0xEC  # peer clock precision
    packet[12:16] = bytes((49, 0x4E, 49, 52))
    return bytes(packet)


def parse_ntp_response(packet: bytes) -> int:
    """Seconds since 1970 from the transmit timestamp of a server reply."""
    if len(packet) < NTP_PACKET_SIZE:
        raise ValueError(f"NTP packet too short: {len(packet)} bytes")
    (secs_since_1900,) = struct.unpack_from(">I", packet, 40)
    return (secs_since_1900 - SEVENTY_YEARS) & _UINT32


class NTPClient:
    """Polls an NTP server at most once per update interval and extrapolates between polls."""

    def __init__(
        self,
        pool_server: str = DEFAULT_POOL_SERVER,
        time_offset: int = 0,
        update_interval: int = DEFAULT_UPDATE_INTERVAL,
        millis: Optional[Callable[[], int]] = None,
        socket_factory: Optional[Callable[[], socket.socket]] = None,
    ) -> None:
        self.pool_server = pool_server
        self.time_offset = int(time_offset)
        self.update_interval = int(update_interval)
        self.port = NTP_DEFAULT_LOCAL_PORT
        self._millis = millis or _default_millis
        self._socket_factory = socket_factory or _default_socket
        self._sock = None
        self._udp_setup = False
        self._current_epoch = 0
        self._last_update = 0

    def __enter__(self) -> "NTPClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.end()

    def begin(self, port: int = NTP_DEFAULT_LOCAL_PORT) -> None:
        """Open the UDP socket on the given local port."""
        if self._sock is not None:
            self._sock.close()
        self.port = int(port)
        sock = self._socket_factory()
        sock.bind(("", self.port))
        self._sock = sock
        self._udp_setup = True

    def update(self) -> bool:
        """Query the server if the update interval has passed; True on a fresh time."""
        elapsed = (self._millis() - self._last_update) & _UINT32
        if elapsed >= self.update_interval or self._last_update == 0:
            if not self._udp_setup or self.port != NTP_DEFAULT_LOCAL_PORT:
                self.begin(self.port)
            return self.force_update()
        return False

    def force_update(self) -> bool:
        """Query the server now; False when no reply arrives within about a second."""
        if self._sock is None:
            raise RuntimeError("begin() has not been called")
        sock = self._sock
        self._flush()
        sock.sendto(build_ntp_request(), (self.pool_server, NTP_SERVER_PORT))

        sock.settimeout(_POLL_INTERVAL)
        polls = 0
        packet = None
        while packet is None:
            try:
                packet = sock.recv(NTP_PACKET_SIZE)
            except (socket.timeout, BlockingIOError, InterruptedError):
                packet = None
            if packet is None and polls > _MAX_POLLS:
                return False
            polls += 1

        self._last_update = (self._millis() - 10 * (polls + 1)) & _UINT32
        self._current_epoch = parse_ntp_response(packet)
        return True

    def _flush(self) -> None:
        sock = self._sock
        sock.setblocking(False)
        try:
            while True:
                sock.recv(NTP_PACKET_SIZE)
        except (BlockingIOError, InterruptedError, socket.timeout):
            pass

    def epoch_time(self) -> int:
        """Seconds since 1970, including the offset and time since the last poll."""
        since_update = ((self._millis() - self._last_update) & _UINT32) // 1000
        return (self.time_offset + self._current_epoch + since_update) & _UINT32

    def day(self) -> int:
        """Day of the week, 0 is Sunday."""
        return (self.epoch_time() // 86400 + 4) % 7

    def hours(self) -> int:
        return (self.epoch_time() % 86400) // 3600

    def minutes(self) -> int:
        return (self.epoch_time() % 3600) // 60

    def seconds(self) -> int:
        return self.epoch_time() % 60

    def formatted_time(self) -> str:
        """Time of day as hh:mm:ss."""
        raw = self.epoch_time()
        return f"{(raw % 86400) // 3600:02d}:{(raw % 3600) // 60:02d}:{raw % 60:02d}"

    def end(self) -> None:
        """Close the UDP socket."""
        if self._sock is not None:
            self._sock.close()
            self._sock = None
        self._udp_setup = False

    def set_random_port(self, min_value: int = 49152, max_value: int = 65535) -> None:
        """Pick a local port in [min_value, max_value)."""
        self.port = random.randrange(min_value, max_value)