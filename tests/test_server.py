import socket
import threading
import time

import pytest

from liftsim.elevator import Elevator
from liftsim.protocol import Direction, ElevatorMessage, MessageType, StatusMessage
from liftsim.server import ElevatorServer


def _fast_sleep(_seconds):
    time.sleep(0.001)


def _wait_until(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def _recv_exact(sock, size):
    data = b""
    while len(data) < size:
        chunk = sock.recv(size - len(data))
        if not chunk:
            break
        data += chunk
    return data


@pytest.fixture
def running_server():
    server = ElevatorServer(0, "127.0.0.1", Elevator(sleep=_fast_sleep))
    thread = threading.Thread(target=server.run, daemon=True)
    thread.start()
    yield server, thread
    server.close()
    thread.join(timeout=5)


def _connect(server):
    conn = socket.create_connection(server.address, timeout=5)
    conn.settimeout(5)
    return conn


def test_new_client_receives_start_signal(running_server):
    server, _ = running_server
    with _connect(server) as conn:
        start = ElevatorMessage.unpack(_recv_exact(conn, ElevatorMessage.SIZE))
        assert start.type is MessageType.START
        assert start.dir is Direction.STAY
        assert (start.src_floor, start.dst_floor) == (0, 0)
        assert _wait_until(lambda: len(server.clients) == 1)


def test_idle_elevator_reports_first_floor(running_server):
    server, _ = running_server
    with _connect(server) as conn:
        _recv_exact(conn, ElevatorMessage.SIZE)
        status = StatusMessage.unpack(_recv_exact(conn, StatusMessage.SIZE))
        assert status.type is MessageType.STATUS
        assert status.current_floor == 1


def test_request_is_carried_to_destination(running_server):
    server, _ = running_server
    with _connect(server) as conn:
        _recv_exact(conn, ElevatorMessage.SIZE)
        request = ElevatorMessage(MessageType.REQUEST, Direction.UP, 1, 3)
        conn.sendall(request.pack())
        assert _wait_until(lambda: server.elevator.total_passengers == 1)

        floors = []
        deadline = time.monotonic() + 5
        while time.monotonic() < deadline and 3 not in floors:
            status = StatusMessage.unpack(_recv_exact(conn, StatusMessage.SIZE))
            floors.append(status.current_floor)
        assert 3 in floors
        assert all(1 <= floor <= 3 for floor in floors)


def test_non_request_messages_are_ignored(running_server):
    server, _ = running_server
    with _connect(server) as conn:
        _recv_exact(conn, ElevatorMessage.SIZE)
        conn.sendall(ElevatorMessage(MessageType.START, Direction.STAY, 2, 2).pack())
        conn.sendall(ElevatorMessage(MessageType.REQUEST, Direction.DOWN, 5, 2).pack())
        assert _wait_until(lambda: server.elevator.total_passengers >= 1)
        time.sleep(0.1)
        assert server.elevator.total_passengers == 1


def test_disconnected_client_is_forgotten(running_server):
    server, _ = running_server
    conn = _connect(server)
    start = ElevatorMessage.unpack(_recv_exact(conn, ElevatorMessage.SIZE))
    assert start.type is MessageType.START
    _wait_until(lambda: len(server.clients) == 1)
    assert len(server.clients) == 1
    conn.close()
    _wait_until(lambda: len(server.clients) == 0)
    assert server.clients == set()


def test_close_stops_server_and_drops_clients(running_server, capsys):
    server, thread = running_server
    conn = _connect(server)
    _recv_exact(conn, ElevatorMessage.SIZE)
    assert _wait_until(lambda: len(server.clients) == 1)

    server.close()
    thread.join(timeout=5)
    assert not thread.is_alive()
    assert server.clients == set()

    with conn:
        deadline = time.monotonic() + 5
        closed = False
        while time.monotonic() < deadline:
            try:
                chunk = conn.recv(1024)
            except ConnectionResetError:
                closed = True
                break
            if not chunk:
                closed = True
                break
        assert closed

    out = capsys.readouterr().out
    assert "passengers served" in out

    with pytest.raises(OSError):
        socket.create_connection(server.address, timeout=1)