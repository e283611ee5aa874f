from typing import Any, Protocol


class BoardConfigPort(Protocol):
    async def fetch_board_config(self) -> dict[str, Any]: ...
