import logging

from editor_link.adapters.http_board_config import HttpBoardConfigFetcher
from editor_link.adapters.memory_store import EditorStateStore
from editor_link.adapters.unix_control import UnixSocketControlServer
from editor_link.adapters.websocket_relay import WebsocketRelayTransport
from editor_link.config import EditorLinkConfig
from editor_link.domain.connection import ConnectionManager
from editor_link.domain.controller import EditorController
from editor_link.domain.dispatcher import ProtocolDispatcher
from editor_link.domain.messages import Identity
from editor_link.ports.board_config import BoardConfigPort
from editor_link.ports.control import ControlPort
from editor_link.ports.state_sink import StateSink
from editor_link.ports.transport import RelayTransportPort

logger = logging.getLogger(__name__)


def create_transport(config: EditorLinkConfig) -> RelayTransportPort:
    return WebsocketRelayTransport(open_timeout_seconds=config.open_timeout_seconds)


def create_board_config(config: EditorLinkConfig) -> BoardConfigPort | None:
    if not config.board_config_url:
        return None
    return HttpBoardConfigFetcher(
        url=config.board_config_url,
        timeout_seconds=config.board_config_timeout_seconds,
    )


def create_manager(
    config: EditorLinkConfig,
    sink: StateSink,
    transport: RelayTransportPort | None = None,
) -> ConnectionManager:
    return ConnectionManager(
        transport=transport or create_transport(config),
        dispatcher=ProtocolDispatcher(sink),
        relay_url=config.relay_url,
        identity=Identity(name=config.identity_name()),
        retry_delay_seconds=config.retry_delay_seconds,
    )


def create_link(
    config: EditorLinkConfig,
) -> tuple[ConnectionManager, EditorStateStore, ControlPort, BoardConfigPort | None]:
    store = EditorStateStore()
    manager = create_manager(config, store)
    controller = EditorController(manager, snapshot=store.snapshot)
    control = UnixSocketControlServer(controller.handle, socket_path=config.socket_path)
    board_config = create_board_config(config)
    return manager, store, control, board_config
