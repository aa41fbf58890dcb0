"""Test client that replays elevator requests from a data file."""

from __future__ import annotations

import random
import socket
import sys
import threading
import time

from . import constants
from .protocol import Direction, ElevatorMessage, MessageType, StatusMessage

_TYPES = {
    "MSG_REQUEST": MessageType.REQUEST,
    "MSG_START": MessageType.START,
    "MSG_STATUS": MessageType.STATUS,
}

_DIRECTIONS = {
    "UP": Direction.UP,
    "DOWN": Direction.DOWN,
    "STAY": Direction.STAY,
}


def parse_request(line: str) -> ElevatorMessage | None:
    """Parse a ``TYPE DIRECTION SRC DST`` line.

    Returns None for lines with too few fields or an unknown type or
    direction. A floor that is not a number raises ValueError.
    """
    fields = line.split()
    if len(fields) < 4:
        return None
    type_str, dir_str, src_str, dst_str = fields[:4]
    kind = _TYPES.get(type_str)
    direction = _DIRECTIONS.get(dir_str)
    if kind is None or direction is None:
        return None
    src = int(src_str) & 0xFF
    dst = int(dst_str) & 0xFF
    return ElevatorMessage(kind, direction, src, dst)


def receive_status(sock: socket.socket) -> list[int]:
    """Print every status received until the connection ends; return the floors seen."""
    floors: list[int] = []
    buffer = b""
    size = StatusMessage.SIZE
    while True:
        try:
            chunk = sock.recv(constants.BUFFER_SIZE)
        except OSError:
            break
        if not chunk:
            break
        buffer += chunk
        while len(buffer) >= size:
            raw, buffer = buffer[:size], buffer[size:]
            try:
                status = StatusMessage.unpack(raw)
            except ValueError:
                continue
            if status.type is MessageType.STATUS:
                print(f" elevator current floor: {status.current_floor}")
                floors.append(status.current_floor)
    return floors


def _recv_exact(sock: socket.socket, size: int) -> bytes | None:
    data = b""
    while len(data) < size:
        chunk = sock.recv(size - len(data))
        if not chunk:
            return None
        data += chunk
    return data


def main(argv: list[str] | None = None) -> int:
    """Connect to the server and send the requests listed in a data file."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        print("Usage: liftsim-client <data_file>", file=sys.stderr)
        return 1

    path = args[0]
    try:
        infile = open(path, encoding="utf-8")
    except OSError:
        print(f"cannot open file: {path}", file=sys.stderr)
        return 1

    with infile:
        try:
            sock = socket.create_connection((constants.SERVER_IP, constants.PORT))
        except OSError as exc:
            print(f"connect: {exc}", file=sys.stderr)
            return 1

        with sock:
            raw = _recv_exact(sock, ElevatorMessage.SIZE)
            start = None
            if raw is not None:
                try:
                    start = ElevatorMessage.unpack(raw)
                except ValueError:
                    start = None
            if start is None or start.type is not MessageType.START:
                print("did not receive the START message", file=sys.stderr)
                return 1

            print("START received. Sending requests...")
            status_thread = threading.Thread(target=receive_status, args=(sock,), daemon=True)
            status_thread.start()

            for line in infile:
                request = parse_request(line)
                if request is None or request.type is not MessageType.REQUEST:
                    continue
                print(f"sending request : floor {request.src_floor} -> {request.dst_floor}")
                request.stamp()
                sock.sendall(request.pack())
                time.sleep(random.randint(3, 5))

            status_thread.join()
    return 0