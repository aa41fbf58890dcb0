# liftsim

A small client–server elevator simulation. The server runs one elevator
across ten floors. Clients connect over TCP and send ride requests, such as
"I am on floor 3 and want to go to floor 7". After every step the elevator
takes, each client receives its current floor.

## Install

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Running the server

```
liftsim-server
```

The server listens on port 12345 on all interfaces. It sends every
connecting client a start signal. The elevator runs in a background thread
and repeats the same step:

1. Wait one second.
2. Let off the passengers whose destination is the current floor.
3. Board the riders waiting on this floor whose direction matches the
   elevator's direction. If the elevator is idle, board all of them. The
   direction of the last rider to board becomes the elevator's direction.
4. If the car is empty, head for the floor of the oldest waiting request.
   If nobody is waiting, stay put.
5. Move one floor and broadcast the new floor to every connected client.

Dropping passengers off adds one second to a step, and boarding adds three.

Press Ctrl+C to stop the server. It then prints a summary with two figures:

- the number of requests received;
- the average waiting time in seconds.

Waiting time is added up from each request's timestamp to each time the
elevator stops at that rider's floor. If no request was received, the
average is `nan`. The server then closes every client connection.

## Running a client

```
liftsim-client requests.txt
```

The client connects to 127.0.0.1:12345 and waits for the start signal.
It then reads the file line by line. Each line holds four
whitespace-separated fields:

- type: `MSG_REQUEST`, `MSG_START` or `MSG_STATUS`
- direction: `UP`, `DOWN` or `STAY`
- source floor
- destination floor

For example:

```
MSG_REQUEST UP 1 5
MSG_REQUEST DOWN 8 2
MSG_REQUEST UP 3 9
```

The client skips lines that have too few fields, an unknown type or an
unknown direction. It sends only the lines of type `MSG_REQUEST`, each
stamped with the current time. After each one it waits 3 to 5 seconds at
random. Meanwhile it prints every floor update the server broadcasts.

## Using it as a library

- `liftsim.protocol` defines the wire messages. All of them are
  little-endian with no padding.
  - `ElevatorMessage` is 8 bytes, and `StatusMessage` is 6 bytes. Each has
    `pack()` and `unpack()`, and `unpack()` raises `ValueError` on a wrong
    length or an unknown type or direction.
  - `ElevatorMessage.stamp()` sets its timestamp to now.
  - `MessageType` and `Direction` are integer enums.
  - `now_timestamp()` gives the current time in whole seconds.
- `liftsim.elevator.Elevator` holds the scheduling logic. It takes
  injectable `sleep` and `clock` callables, so tests can drive it step by
  step without waiting in real time.
  - `add_request(msg)` queues a rider.
  - `move_and_process(clients)` runs one step. It sends the status to each
    client's `sendall` and returns the `StatusMessage`.
  - `average_waiting_time()` and `print_report()` give the summary.
- `liftsim.server.ElevatorServer(port, host, elevator)` is the server. Its
  `run()` method serves until `close()` is called. `close()` prints the
  summary and drops every client.
- `liftsim.client.parse_request(line)` parses one line of a request file.
  It returns `None` for lines that are skipped. `receive_status(sock)`
  prints status updates until the connection ends and returns the floors
  it saw.

The settings — port, server address, step durations and the number of
floors — are plain values in `liftsim.constants`.