"""TCP server that accepts passengers' requests and drives the elevator."""

from __future__ import annotations

import argparse
import selectors
import socket
import threading

from . import constants
from .elevator import Elevator
from .protocol import Direction, ElevatorMessage, MessageType


class ElevatorServer:
    """Accepts clients, forwards their requests to an elevator and broadcasts its status.

    Every connecting client first receives a start signal. The elevator runs in
    a background thread for as long as the server is running, and sends each
    status to every connected client.
    """

    def __init__(
        self,
        port: int = constants.PORT,
        host: str = "",
        elevator: Elevator | None = None,
    ) -> None:
        self.elevator = elevator if elevator is not None else Elevator()
        self.clients: set[socket.socket] = set()
        self._buffers: dict[socket.socket, bytes] = {}
        self._lock = threading.RLock()
        self._stopped = threading.Event()
        self._closed = False

        self._listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            self._listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            self._listener.bind((host, port))
            self._listener.listen(socket.SOMAXCONN)
            self._listener.setblocking(False)
        except OSError:
            self._listener.close()
            raise
        self.address = self._listener.getsockname()

        self._selector = selectors.DefaultSelector()
        self._selector.register(self._listener, selectors.EVENT_READ)

    def run(self) -> None:
        """Serve clients and run the elevator until the server is closed."""
        worker = threading.Thread(target=self._drive_elevator, daemon=True)
        worker.start()
        try:
            while not self._stopped.is_set():
                try:
                    events = self._selector.select(timeout=0.1)
                except (OSError, ValueError):
                    if self._stopped.is_set():
                        break
                    raise
                with self._lock:
                    if self._stopped.is_set():
                        break
                    for key, _ in events:
                        if key.fileobj is self._listener:
                            self._accept()
                        else:
                            self._handle_client(key.fileobj)
        finally:
            self._stopped.set()

    def close(self) -> None:
        """Stop serving, print the waiting-time summary and drop every client."""
        self._stopped.set()
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self.elevator.print_report()
            for client in list(self.clients):
                print(f"closing connection to client {client.fileno()}")
                self._drop(client)
            try:
                self._selector.unregister(self._listener)
            except (KeyError, ValueError):
                pass
            self._listener.close()
            self._selector.close()

    def _drive_elevator(self) -> None:
        while not self._stopped.is_set():
            with self._lock:
                snapshot = list(self.clients)
            self.elevator.move_and_process(snapshot)

    def _accept(self) -> None:
        try:
            conn, _ = self._listener.accept()
        except BlockingIOError:
            return
        conn.setblocking(False)
        self._selector.register(conn, selectors.EVENT_READ)
        self._buffers[conn] = b""
        print(f"client connected {conn.fileno()}")
        self._send_start_signal(conn)

    def _send_start_signal(self, conn: socket.socket) -> None:
        start = ElevatorMessage(MessageType.START, Direction.STAY, 0, 0)
        try:
            conn.sendall(start.pack())
        except OSError:
            self._drop(conn)
            return
        print(f"sent start signal to {conn.fileno()}")
        self.clients.add(conn)

    def _handle_client(self, conn: socket.socket) -> None:
        try:
            data = conn.recv(constants.BUFFER_SIZE)
        except BlockingIOError:
            return
        except OSError:
            data = b""
        if not data:
            self._drop(conn)
            return

        buffer = self._buffers.get(conn, b"") + data
        size = ElevatorMessage.SIZE
        while len(buffer) >= size:
            raw, buffer = buffer[:size], buffer[size:]
            try:
                msg = ElevatorMessage.unpack(raw)
            except ValueError:
                continue
            if msg.type is MessageType.REQUEST:
                self.elevator.add_request(msg)
                print(f"request received : {msg.src_floor}>>{msg.dst_floor}")
        self._buffers[conn] = buffer

    def _drop(self, conn: socket.socket) -> None:
        try:
            self._selector.unregister(conn)
        except (KeyError, ValueError):
            pass
        self.clients.discard(conn)
        self._buffers.pop(conn, None)
        conn.close()


def main(argv: list[str] | None = None) -> int:
    """Run the elevator simulation server until interrupted."""
    parser = argparse.ArgumentParser(description="Run the elevator simulation server.")
    parser.parse_args(argv)

    print("starting the elevator simulation server")
    server = ElevatorServer(constants.PORT)
    try:
        server.run()
    except KeyboardInterrupt:
        print("\nSIGINT received, writing the summary...")
    finally:
        server.close()
    return 0