import argparse
import asyncio
import json
import logging
import os
import signal
import sys
from pathlib import Path

from editor_link.config import EditorLinkConfig

ENV_FILE_PATH = Path.home() / ".config" / "editor-link" / "env"
CLIENT_COMMANDS = ("play", "pause", "stop", "status")


def _load_env_file() -> None:
    if not ENV_FILE_PATH.exists():
        return
    with open(ENV_FILE_PATH) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            key, _, value = line.partition("=")
            value = value.strip("'\"")
            if key not in os.environ:
                os.environ[key] = value


def _configure_logging(verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )

    if sys.stderr.isatty():
        from editor_link.log_format import ColoredFormatter

        for handler in logging.getLogger().handlers:
            handler.setFormatter(ColoredFormatter(datefmt="%H:%M:%S"))

    if verbose:
        logging.getLogger("websockets").setLevel(logging.INFO)
        logging.getLogger("httpcore").setLevel(logging.INFO)
        logging.getLogger("httpx").setLevel(logging.INFO)


def main() -> None:
    _load_env_file()
    parser = argparse.ArgumentParser(description="Editor link to the light-dance relay")
    parser.add_argument("--relay", help="Relay websocket URL (ws:// or wss://)")
    parser.add_argument("--name", help="Editor name announced to the relay")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="command")

    play_parser = subparsers.add_parser("play", help="Start playback on all dancers")
    play_parser.add_argument("--payload", help="JSON object forwarded with the play command")

    subparsers.add_parser("pause", help="Pause playback")
    subparsers.add_parser("stop", help="Stop playback")
    subparsers.add_parser("status", help="Query connection and dancer status")

    args = parser.parse_args()

    _configure_logging(args.verbose)

    config = EditorLinkConfig()
    if args.relay:
        config.relay_url = args.relay
    if args.name:
        config.host_name = args.name

    if args.command in CLIENT_COMMANDS:
        asyncio.run(_run_client_command(args, config))
    else:
        asyncio.run(_run_daemon(config))


async def _run_client_command(args: argparse.Namespace, config: EditorLinkConfig) -> None:
    from editor_link.adapters.unix_control import UnixSocketControlClient

    client = UnixSocketControlClient(socket_path=config.socket_path)

    payload = None
    if args.command == "play" and args.payload:
        try:
            payload = json.loads(args.payload)
        except json.JSONDecodeError as exc:
            print(f"Invalid --payload JSON: {exc}", file=sys.stderr)
            sys.exit(2)

    try:
        result = await client.send_command(args.command, payload)
    except (ConnectionRefusedError, FileNotFoundError):
        print("Editor link is not running", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(result, indent=2))
    if result.get("status") != "ok":
        sys.exit(1)


async def _run_daemon(config: EditorLinkConfig) -> None:
    from editor_link.adapters.http_board_config import BoardConfigError
    from editor_link.factory import create_link
    from editor_link.health import has_critical_failures, run_startup_checks

    results = run_startup_checks(config)
    if has_critical_failures(results):
        logging.error("Critical health check failures, aborting startup")
        sys.exit(1)

    manager, store, control, board_config = create_link(config)

    if board_config is not None:
        try:
            store.set_board_config(await board_config.fetch_board_config())
        except BoardConfigError as exc:
            logging.warning("Continuing without board config: %s", exc)

    shutdown_event = asyncio.Event()
    shutdown_triggered = False

    def handle_signal() -> None:
        nonlocal shutdown_triggered
        if shutdown_triggered:
            logging.warning("Forced exit")
            sys.exit(1)
        shutdown_triggered = True
        logging.info("Shutting down...")
        shutdown_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, handle_signal)

    await control.start()
    await manager.start()

    try:
        await shutdown_event.wait()
    finally:
        try:
            await asyncio.wait_for(manager.stop(), timeout=3.0)
        except asyncio.TimeoutError:
            logging.warning("Relay connection did not close in time")
        await control.stop()


if __name__ == "__main__":
    main()
