import struct
from collections import deque

import pytest

from loraigate.ntp import (
    NTP_DEFAULT_LOCAL_PORT,
    NTP_PACKET_SIZE,
    SEVENTY_YEARS,
    NTPClient,
    build_ntp_request,
    parse_ntp_response,
)

EPOCH = 1700000000


def make_reply(epoch):
    packet = bytearray(NTP_PACKET_SIZE)
    struct.pack_into(">I", packet, 40, epoch + SEVENTY_YEARS)
    return bytes(packet)


class FakeSocket:
    def __init__(self, server):
        self.server = server
        self.incoming = deque()
        self.sent = []
        self.bound = None
        self.closed = False

    def bind(self, addr):
        self.bound = addr

    def setblocking(self, flag):
        pass

    def settimeout(self, value):
        pass

    def sendto(self, data, addr):
        self.sent.append((data, addr))
        reply = self.server(data)
        if reply is not None:
            self.incoming.append(reply)

    def recv(self, n):
        if self.incoming:
            return self.incoming.popleft()[:n]
        raise BlockingIOError

    def close(self):
        self.closed = True


class FakeClock:
    def __init__(self, start=10000):
        self.value = start

    def __call__(self):
        return self.value


@pytest.fixture
def env():
    clock = FakeClock()
    sockets = []

    def server(data):
        return make_reply(EPOCH)

    def factory():
        sock = FakeSocket(server)
        sockets.append(sock)
        return sock

    client = NTPClient(millis=clock, socket_factory=factory)
    return client, clock, sockets


def test_request_header_bytes():
    request = build_ntp_request()
    assert len(request) == NTP_PACKET_SIZE
    assert request[:4] == bytes((0xE3, 0, 6, 0xEC))
    assert request[12:16] == bytes((49, 0x4E, 49, 52))
    assert request[4:12] == bytes(8)


def test_parse_response_subtracts_seventy_years():
    assert parse_ntp_response(make_reply(EPOCH)) == EPOCH


def test_parse_short_packet_raises():
    with pytest.raises(ValueError):
        parse_ntp_response(bytes(44))


def test_begin_binds_default_port(env):
    client, _, sockets = env
    client.begin()
    assert sockets[0].bound == ("", NTP_DEFAULT_LOCAL_PORT)


def test_force_update_without_begin_raises(env):
    client, _, _ = env
    with pytest.raises(RuntimeError):
        client.force_update()


def test_update_sets_epoch(env):
    client, clock, sockets = env
    assert client.update() is True
    data, addr = sockets[0].sent[0]
    assert data == build_ntp_request()
    assert addr == ("pool.ntp.org", 123)
    assert client.epoch_time() == EPOCH
    clock.value += 5000
    assert client.epoch_time() == EPOCH + 5


def test_update_respects_interval(env):
    client, clock, sockets = env
    assert client.update() is True
    clock.value += 1000
    assert client.update() is False
    assert len(sockets[0].sent) == 1
    clock.value += 3600000
    assert client.update() is True
    assert len(sockets[0].sent) == 2


def test_stale_packets_are_flushed(env):
    client, _, sockets = env
    client.begin()
    sockets[0].incoming.append(make_reply(EPOCH - 1000))
    assert client.force_update() is True
    assert client.epoch_time() == EPOCH


def test_no_reply_returns_false():
    clock = FakeClock()
    client = NTPClient(millis=clock, socket_factory=lambda: FakeSocket(lambda data: None))
    client.begin()
    assert client.force_update() is False


def test_time_offset_applied(env):
    client, _, _ = env
    client.time_offset = 3600
    client.update()
    assert client.epoch_time() == EPOCH + 3600


def test_fields_agree_with_formatted_time(env):
    client, _, _ = env
    client.update()
    expected = f"{client.hours():02d}:{client.minutes():02d}:{client.seconds():02d}"
    assert client.formatted_time() == expected
    assert 0 <= client.day() < 7
    assert client.epoch_time() % 86400 == client.hours() * 3600 + client.minutes() * 60 + client.seconds()


def test_set_random_port_in_range(env):
    client, _, _ = env
    for _ in range(50):
        client.set_random_port(50000, 50010)
        assert 50000 <= client.port < 50010


def test_non_default_port_rebegins_each_update(env):
    client, clock, sockets = env
    client.set_random_port(50000, 50001)
    client.update()
    clock.value += 3600000
    client.update()
    assert len(sockets) == 2
    assert sockets[0].closed is True
    assert sockets[1].bound == ("", 50000)


def test_end_closes_socket(env):
    client, _, sockets = env
    client.begin()
    client.end()
    assert sockets[0].closed is True
    with pytest.raises(RuntimeError):
        client.force_update()