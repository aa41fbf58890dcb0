"""Fixed settings shared by the elevator server, the client and the simulation."""

PORT = 12345
MAX_EVENTS = 64
BUFFER_SIZE = 1024
SERVER_IP = "127.0.0.1"
START_DELAY_MS = 3000

# Durations of the elevator's steps, in milliseconds.
MOVE_INTERVAL_MS = 1000
BOARDING_TIME_MS = 3000
DEPARTURE_TIME_MS = 1000

# Highest floor of the building, also the largest number of clients.
MAX_FLOORS = 10
TEST_REQUEST_COUNT = 5