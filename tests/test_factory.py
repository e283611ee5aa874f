from editor_link.adapters.http_board_config import HttpBoardConfigFetcher
from editor_link.adapters.memory_store import EditorStateStore
from editor_link.adapters.unix_control import UnixSocketControlServer
from editor_link.config import EditorLinkConfig
from editor_link.domain.state import ConnectionState
from editor_link.factory import create_link


class TestCreateLink:
    def test_wires_components(self):
        config = EditorLinkConfig(relay_url="ws://relay.test", host_name="booth")
        manager, store, control, board_config = create_link(config)

        assert manager.state == ConnectionState.IDLE
        assert manager.relay_url == "ws://relay.test"
        assert manager.identity.name == "booth"
        assert isinstance(store, EditorStateStore)
        assert isinstance(control, UnixSocketControlServer)
        assert board_config is None

    def test_control_server_satisfies_control_port(self):
        _, _, control, _ = create_link(EditorLinkConfig())
        assert callable(control.start)
        assert callable(control.stop)

    def test_board_config_when_url_set(self):
        config = EditorLinkConfig(board_config_url="http://editor.test/api/board")
        _, _, _, board_config = create_link(config)
        assert isinstance(board_config, HttpBoardConfigFetcher)
