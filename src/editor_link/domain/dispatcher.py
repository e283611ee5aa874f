import logging
from collections.abc import Mapping
from typing import Any

from editor_link.domain.errors import MalformedMessageError
from editor_link.domain.messages import CONNECT_SUCCESS_MSG, DancerStatus, Message, TaskKind
from editor_link.ports.state_sink import StateSink

logger = logging.getLogger(__name__)


class ProtocolDispatcher:
    """Routes inbound relay messages to a StateSink.

    Every task kind has its own handler; unrecognised task names are handled
    as generic status reports from the peer named in ``from``. Payloads are
    validated before the sink is touched, so a malformed message raises
    MalformedMessageError and leaves the sink unchanged.
    """

    def __init__(self, sink: StateSink) -> None:
        self._sink = sink
        self._handlers = {
            TaskKind.GET_IP: self._handle_get_ip,
            TaskKind.DISCONNECT: self._handle_disconnect,
            TaskKind.PLAY: self._handle_play,
            TaskKind.PAUSE: self._handle_pause,
            TaskKind.STOP: self._handle_stop,
            TaskKind.STATUS_REPORT: self._handle_status_report,
        }

    def dispatch(self, message: Message) -> None:
        kind = message.kind
        logger.debug("Dispatching %s (%s)", message.task, kind.name)
        self._handlers[kind](message)

    def _handle_get_ip(self, message: Message) -> None:
        payload = _require_mapping(message, message.payload, "payload")
        clients = _require_mapping(message, payload.get("dancerClients"), "dancerClients")

        updates: list[tuple[str, DancerStatus]] = []
        for name, client in clients.items():
            if not isinstance(name, str) or not name:
                raise MalformedMessageError(f"{message.task}: dancerClients keys must be dancer names")
            client = _require_mapping(message, client, f"dancerClients.{name}")
            ip = client.get("clientIp")
            if not isinstance(ip, str):
                raise MalformedMessageError(
                    f"{message.task}: dancerClients.{name}.clientIp must be a string"
                )
            updates.append((
                name,
                DancerStatus(ok=True, msg=CONNECT_SUCCESS_MSG, is_connected=True, ip=ip),
            ))

        for name, status in updates:
            self._sink.update_dancer_status(name, status)
        logger.info("Dancers connected: %s", ", ".join(name for name, _ in updates) or "none")

    def _handle_disconnect(self, message: Message) -> None:
        name, ok, msg = _parse_peer_response(message)
        self._sink.update_dancer_status(name, DancerStatus(ok=ok, msg=msg, is_connected=False))
        logger.info("Dancer disconnected: %s (%s)", name, msg)

    def _handle_play(self, message: Message) -> None:
        self._sink.start_play(message.payload)

    def _handle_pause(self, message: Message) -> None:
        self._sink.set_playing(False)

    def _handle_stop(self, message: Message) -> None:
        self._sink.set_stopped(True)

    def _handle_status_report(self, message: Message) -> None:
        name, ok, msg = _parse_peer_response(message)
        self._sink.update_dancer_status(name, DancerStatus(ok=ok, msg=msg))
        logger.debug("Status from %s on %s: ok=%s msg=%s", name, message.task, ok, msg)


def _require_mapping(message: Message, value: Any, field: str) -> Mapping:
    if not isinstance(value, Mapping):
        raise MalformedMessageError(f"{message.task}: {field} must be an object")
    return value


def _parse_peer_response(message: Message) -> tuple[str, bool, str]:
    payload = _require_mapping(message, message.payload, "payload")

    name = payload.get("from")
    if not isinstance(name, str) or not name:
        raise MalformedMessageError(f"{message.task}: 'from' must be a dancer name")

    response = _require_mapping(message, payload.get("response"), "response")
    # Older relays spell the flag "OK".
    ok = response.get("ok", response.get("OK"))
    if not isinstance(ok, bool):
        raise MalformedMessageError(f"{message.task}: response.ok must be a boolean")

    msg = response.get("msg")
    if not isinstance(msg, str):
        raise MalformedMessageError(f"{message.task}: response.msg must be a string")

    return name, ok, msg
