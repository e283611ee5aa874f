import logging
from typing import Any

from editor_link.domain.messages import DancerStatus

logger = logging.getLogger(__name__)


class EditorStateStore:
    """In-process StateSink holding the dancer table and playback flags.

    Status updates merge into the existing entry: fields a message leaves
    unspecified keep their previous value.
    """

    def __init__(self) -> None:
        self._dancers: dict[str, dict[str, Any]] = {}
        self._playing = False
        self._stopped = True
        self._play_payload: Any = None
        self._board_config: dict[str, Any] = {}

    @property
    def dancers(self) -> dict[str, dict[str, Any]]:
        return {name: dict(status) for name, status in self._dancers.items()}

    @property
    def playing(self) -> bool:
        return self._playing

    @property
    def stopped(self) -> bool:
        return self._stopped

    @property
    def play_payload(self) -> Any:
        return self._play_payload

    @property
    def board_config(self) -> dict[str, Any]:
        return self._board_config

    def update_dancer_status(self, name: str, status: DancerStatus) -> None:
        entry = self._dancers.setdefault(name, {})
        entry.update(status.as_dict())

    def start_play(self, payload: Any) -> None:
        self._play_payload = payload
        self._playing = True
        self._stopped = False
        logger.info("Playback started")

    def set_playing(self, playing: bool) -> None:
        self._playing = playing
        logger.info("Playback %s", "resumed" if playing else "paused")

    def set_stopped(self, stopped: bool) -> None:
        self._stopped = stopped
        if stopped:
            self._playing = False
            logger.info("Playback stopped")

    def set_board_config(self, config: dict[str, Any]) -> None:
        self._board_config = config

    def snapshot(self) -> dict[str, Any]:
        return {
            "dancers": self.dancers,
            "playing": self._playing,
            "stopped": self._stopped,
            "board_config_loaded": bool(self._board_config),
        }
