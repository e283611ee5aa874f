from enum import Enum, auto


class ConnectionState(Enum):
    IDLE = auto()
    CONNECTING = auto()
    OPEN = auto()
    CLOSED = auto()


VALID_TRANSITIONS: dict[ConnectionState, set[ConnectionState]] = {
    ConnectionState.IDLE: {ConnectionState.CONNECTING, ConnectionState.CLOSED},
    ConnectionState.CONNECTING: {ConnectionState.OPEN, ConnectionState.CLOSED},
    ConnectionState.OPEN: {ConnectionState.CLOSED},
    ConnectionState.CLOSED: {ConnectionState.CONNECTING},
}


class InvalidTransitionError(Exception):
    pass


def validate_transition(current: ConnectionState, target: ConnectionState) -> None:
    if target not in VALID_TRANSITIONS.get(current, set()):
        raise InvalidTransitionError(f"Cannot transition from {current.name} to {target.name}")
