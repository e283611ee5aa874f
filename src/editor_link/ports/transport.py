from typing import AsyncIterator, Protocol


class RelaySocket(Protocol):
    async def send(self, frame: str) -> None: ...
    def frames(self) -> AsyncIterator[str | bytes]: ...
    async def close(self) -> None: ...


class RelayTransportPort(Protocol):
    async def connect(self, url: str) -> RelaySocket: ...
