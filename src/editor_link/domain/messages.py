from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

BOARD_INFO_TASK = "boardInfo"
EDITOR_ROLE = "editor"
CONNECT_SUCCESS_MSG = "Connect Success"


class TaskKind(Enum):
    GET_IP = auto()
    DISCONNECT = auto()
    PLAY = auto()
    PAUSE = auto()
    STOP = auto()
    STATUS_REPORT = auto()


TASK_NAMES: dict[str, TaskKind] = {
    "getIp": TaskKind.GET_IP,
    "disconnect": TaskKind.DISCONNECT,
    "play": TaskKind.PLAY,
    "pause": TaskKind.PAUSE,
    "stop": TaskKind.STOP,
}


def classify(task: str) -> TaskKind:
    # Unrecognised task names are status reports from a named peer.
    return TASK_NAMES.get(task, TaskKind.STATUS_REPORT)


@dataclass(frozen=True)
class Message:
    task: str
    payload: Any = None

    @property
    def kind(self) -> TaskKind:
        return classify(self.task)


@dataclass(frozen=True)
class DancerStatus:
    ok: bool
    msg: str
    is_connected: bool | None = None
    ip: str | None = None

    def as_dict(self) -> dict[str, Any]:
        status: dict[str, Any] = {"ok": self.ok, "msg": self.msg}
        if self.is_connected is not None:
            status["isConnected"] = self.is_connected
        if self.ip is not None:
            status["ip"] = self.ip
        return status


@dataclass(frozen=True)
class Identity:
    name: str
    role: str = EDITOR_ROLE

    def announcement(self) -> Message:
        return Message(BOARD_INFO_TASK, {"type": self.role, "name": self.name})


def play_command(payload: Any = None) -> Message:
    return Message("play", payload if payload is not None else {})


def pause_command() -> Message:
    return Message("pause", {})


def stop_command() -> Message:
    return Message("stop", {})
