from typing import Any, Protocol

from editor_link.domain.messages import DancerStatus


class StateSink(Protocol):
    def update_dancer_status(self, name: str, status: DancerStatus) -> None: ...
    def start_play(self, payload: Any) -> None: ...
    def set_playing(self, playing: bool) -> None: ...
    def set_stopped(self, stopped: bool) -> None: ...
