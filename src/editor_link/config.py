import socket

from pydantic_settings import BaseSettings, SettingsConfigDict


class EditorLinkConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="EDITOR_LINK_")

    relay_url: str = "ws://localhost:8080"
    host_name: str = ""

    retry_delay_seconds: float = 3.0
    open_timeout_seconds: float = 10.0

    board_config_url: str = ""
    board_config_timeout_seconds: float = 10.0

    socket_path: str = "/tmp/editor-link.sock"

    def identity_name(self) -> str:
        return self.host_name or socket.gethostname()
