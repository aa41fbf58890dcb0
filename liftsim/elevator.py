"""A single elevator that collects, carries and drops off passengers."""

from __future__ import annotations

import heapq
import itertools
import math
import sys
import threading
import time
from collections.abc import Callable, Iterable

from . import constants
from .protocol import Direction, ElevatorMessage, MessageType, StatusMessage, now_timestamp


class Elevator:
    """Elevator state and the step that moves it by one floor.

    Waiting passengers are kept per floor, oldest request first.  Requests may
    be added from one thread while another thread drives the elevator.
    """

    def __init__(
        self,
        sleep: Callable[[float], object] = time.sleep,
        clock: Callable[[], int] = now_timestamp,
    ) -> None:
        self._sleep = sleep
        self._clock = clock
        self._lock = threading.Lock()
        self._waiting: dict[int, list[tuple[int, int, ElevatorMessage]]] = {}
        self._order = itertools.count()

        self.current_floor = 1
        self.direction = Direction.STAY
        self.passengers: list[int] = []
        self.total_waiting_time = 0
        self.total_passengers = 0

    def add_request(self, msg: ElevatorMessage) -> None:
        """Register a passenger waiting at ``msg.src_floor``."""
        with self._lock:
            print(f"{msg.timestamp} : {msg.dst_floor}")
            heapq.heappush(
                self._waiting.setdefault(msg.src_floor, []),
                (msg.timestamp, next(self._order), msg),
            )
            self.total_passengers += 1

    def move_and_process(self, clients: Iterable[object]) -> StatusMessage:
        """Run one step: drop off, pick up, choose a direction, move, report.

        Every client in ``clients`` receives the resulting status through its
        ``sendall`` method; send failures are ignored.  The status is returned.
        """
        self._sleep(constants.MOVE_INTERVAL_MS / 1000)

        self._drop_off()
        if self._board():
            self._sleep(constants.BOARDING_TIME_MS / 1000)

        if not self.passengers:
            if self._has_waiting():
                next_floor = self._next_waiting_floor()
                self.direction = (
                    Direction.DOWN if self.current_floor > next_floor else Direction.UP
                )
            else:
                self.direction = Direction.STAY

        if self.direction is Direction.UP:
            self.current_floor += 1
        elif self.direction is Direction.DOWN:
            self.current_floor -= 1

        if not 1 <= self.current_floor <= constants.MAX_FLOORS:
            print(f"floor {self.current_floor} cannot be reached", file=sys.stderr)

        status = StatusMessage(MessageType.STATUS, self.current_floor & 0xFF)
        payload = status.pack()
        for client in list(clients):
            try:
                client.sendall(payload)
            except OSError:
                pass
        return status

    def average_waiting_time(self) -> float:
        """Return the mean waiting time per passenger, or NaN if there were none."""
        if self.total_passengers == 0:
            return math.nan
        return self.total_waiting_time / self.total_passengers

    def print_report(self) -> None:
        """Print a summary of the passengers served and their mean waiting time."""
        rule = "=" * 58
        print(f"{'=' * 20} summary {'=' * 29}")
        print(f"passengers served     : {self.total_passengers}")
        print(f"average waiting time  : {self.average_waiting_time()}")
        print(rule)

    def _drop_off(self) -> None:
        before = len(self.passengers)
        self.passengers = [dst for dst in self.passengers if dst != self.current_floor]
        after = len(self.passengers)
        if after == 0:
            self.direction = Direction.STAY
        if before != after:
            print(f"drop-off : {before - after} passenger(s) got off")
            self._sleep(constants.DEPARTURE_TIME_MS / 1000)

    def _board(self) -> bool:
        boarded = False
        with self._lock:
            waiting = self._waiting.get(self.current_floor)
            if not waiting:
                return False
            remaining: list[tuple[int, int, ElevatorMessage]] = []
            while waiting:
                entry = heapq.heappop(waiting)
                msg = entry[2]
                self.total_waiting_time += self._clock() - msg.timestamp
                if msg.dir == self.direction or self.direction is Direction.STAY:
                    print(f"{msg.timestamp} boarding : {msg.src_floor} >> {msg.dst_floor}")
                    self.passengers.append(msg.dst_floor)
                    self.direction = Direction(msg.dir)
                    boarded = True
                else:
                    heapq.heappush(remaining, entry)
            self._waiting[self.current_floor] = remaining
        return boarded

    def _has_waiting(self) -> bool:
        with self._lock:
            return any(self._waiting.values())

    def _next_waiting_floor(self) -> int:
        """Floor of the oldest waiting request; lower floors win ties."""
        with self._lock:
            best_floor = -1
            best_time: int | None = None
            for floor in sorted(self._waiting):
                queue = self._waiting[floor]
                if queue and (best_time is None or queue[0][0] < best_time):
                    best_floor = floor
                    best_time = queue[0][0]
            return best_floor