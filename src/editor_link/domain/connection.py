import asyncio
import logging

from editor_link.domain.codec import decode, encode
from editor_link.domain.dispatcher import ProtocolDispatcher
from editor_link.domain.errors import (
    MalformedFrameError,
    MalformedMessageError,
    PreconditionError,
    TransportError,
)
from editor_link.domain.messages import Identity, Message
from editor_link.domain.state import ConnectionState, validate_transition
from editor_link.ports.transport import RelaySocket, RelayTransportPort

logger = logging.getLogger(__name__)

DEFAULT_RETRY_DELAY_SECONDS = 3.0


class ConnectionManager:
    def __init__(
        self,
        transport: RelayTransportPort,
        dispatcher: ProtocolDispatcher,
        relay_url: str,
        identity: Identity,
        retry_delay_seconds: float = DEFAULT_RETRY_DELAY_SECONDS,
    ) -> None:
        self._transport = transport
        self._dispatcher = dispatcher
        self._relay_url = relay_url
        self._identity = identity
        self._retry_delay_seconds = retry_delay_seconds

        self._state = ConnectionState.IDLE
        self._socket: RelaySocket | None = None
        self._task: asyncio.Task | None = None
        self._stop_requested = False
        self._open_event = asyncio.Event()

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def identity(self) -> Identity:
        return self._identity

    @property
    def relay_url(self) -> str:
        return self._relay_url

    def _transition_to(self, target: ConnectionState) -> None:
        validate_transition(self._state, target)
        logger.info("Connection: %s -> %s", self._state.name, target.name)
        self._state = target
        if target == ConnectionState.OPEN:
            self._open_event.set()
        else:
            self._open_event.clear()

    async def start(self) -> None:
        if self._state not in (ConnectionState.IDLE, ConnectionState.CLOSED):
            return
        # A lost connection sits in CLOSED while its retry timer runs.
        await self._cancel_task()
        self._stop_requested = False
        self._transition_to(ConnectionState.CONNECTING)
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        self._stop_requested = True
        await self._cancel_task()
        await self._close_socket()
        if self._state != ConnectionState.CLOSED:
            self._transition_to(ConnectionState.CLOSED)

    async def wait_until_open(self) -> None:
        await self._open_event.wait()

    async def send(self, message: Message) -> None:
        if self._state != ConnectionState.OPEN or self._socket is None:
            raise PreconditionError(
                f"Cannot send {message.task!r} while connection is {self._state.name}"
            )
        frame = encode(message)
        logger.debug("Sending %s", frame)
        try:
            await self._socket.send(frame)
        except TransportError:
            raise
        except Exception as exc:
            raise TransportError(f"Failed to send {message.task!r}: {exc}") from exc

    async def _run(self) -> None:
        while not self._stop_requested:
            try:
                socket = await self._transport.connect(self._relay_url)
            except Exception as exc:
                logger.warning(
                    "Relay %s unavailable (%s); retrying in %.1fs",
                    self._relay_url,
                    exc,
                    self._retry_delay_seconds,
                )
                await asyncio.sleep(self._retry_delay_seconds)
                continue

            self._socket = socket
            self._transition_to(ConnectionState.OPEN)
            try:
                await self._session(socket)
            finally:
                await self._close_socket()

            self._transition_to(ConnectionState.CLOSED)
            logger.warning("Relay connection closed; reconnecting in %.1fs", self._retry_delay_seconds)
            await asyncio.sleep(self._retry_delay_seconds)
            self._transition_to(ConnectionState.CONNECTING)

    async def _session(self, socket: RelaySocket) -> None:
        try:
            await self.send(self._identity.announcement())
            logger.info("Announced as %s '%s'", self._identity.role, self._identity.name)
            async for frame in socket.frames():
                self._handle_frame(frame)
        except TransportError as exc:
            logger.warning("Relay transport error: %s", exc)
        except Exception:
            logger.exception("Relay session failed")

    def _handle_frame(self, frame: str | bytes) -> None:
        try:
            message = decode(frame)
        except MalformedFrameError as exc:
            logger.warning("Dropping malformed frame: %s", exc)
            return

        try:
            self._dispatcher.dispatch(message)
        except MalformedMessageError as exc:
            logger.warning("Dropping malformed message: %s", exc)
        except Exception:
            logger.exception("Failed to apply %r message", message.task)

    async def _cancel_task(self) -> None:
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        # asyncio.wait leaves a cancellation aimed at the caller to propagate.
        await asyncio.wait([task])
        if not task.cancelled() and task.exception() is not None:
            logger.warning("Connection task ended with error: %s", task.exception())

    async def _close_socket(self) -> None:
        socket, self._socket = self._socket, None
        if socket is None:
            return
        try:
            await socket.close()
        except Exception as exc:
            logger.debug("Ignoring error while closing relay socket: %s", exc)
