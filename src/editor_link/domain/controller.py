import logging
from collections.abc import Callable
from typing import Any

from editor_link.domain.connection import ConnectionManager
from editor_link.domain.errors import PreconditionError, TransportError
from editor_link.domain.messages import Message, pause_command, play_command, stop_command
from editor_link.ports.control import ControlCommand

logger = logging.getLogger(__name__)


class EditorController:
    def __init__(
        self,
        manager: ConnectionManager,
        snapshot: Callable[[], dict[str, Any]] | None = None,
    ) -> None:
        self._manager = manager
        self._snapshot = snapshot

    async def handle(self, command: ControlCommand) -> dict:
        if command.action == "play":
            return await self._send(play_command(command.payload))
        if command.action == "pause":
            return await self._send(pause_command())
        if command.action == "stop":
            return await self._send(stop_command())
        if command.action == "status":
            return self.status()
        logger.warning("Unknown control action: %s", command.action)
        return {"status": "error", "action": command.action, "error": "unknown action"}

    def status(self) -> dict:
        result = {
            "status": "ok",
            "action": "status",
            "connection": self._manager.state.name,
            "relay": self._manager.relay_url,
            "name": self._manager.identity.name,
        }
        if self._snapshot:
            result["store"] = self._snapshot()
        return result

    async def _send(self, message: Message) -> dict:
        try:
            await self._manager.send(message)
        except (PreconditionError, TransportError) as exc:
            logger.warning("Command %s not sent: %s", message.task, exc)
            return {"status": "error", "action": message.task, "error": str(exc)}
        logger.info("Command sent: %s", message.task)
        return {"status": "ok", "action": message.task}
