from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class ControlCommand:
    action: str
    payload: dict | None = None


ControlHandler = Callable[[ControlCommand], Awaitable[dict]]


class ControlPort(Protocol):
    async def start(self) -> None: ...
    async def stop(self) -> None: ...
