import json

from editor_link.domain.errors import MalformedFrameError
from editor_link.domain.messages import Message


def encode(message: Message) -> str:
    return json.dumps(
        [message.task, message.payload],
        separators=(",", ":"),
        ensure_ascii=False,
    )


def decode(frame: str | bytes) -> Message:
    if isinstance(frame, (bytes, bytearray)):
        try:
            frame = frame.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedFrameError(f"Frame is not valid UTF-8: {exc}") from exc

    try:
        data = json.loads(frame)
    except json.JSONDecodeError as exc:
        raise MalformedFrameError(f"Frame is not valid JSON: {exc}") from exc
    except (ValueError, RecursionError) as exc:
        # Over-long integers and deep nesting fail outside the JSON grammar.
        raise MalformedFrameError(f"Frame cannot be parsed: {exc.__class__.__name__}") from exc

    if not isinstance(data, list) or len(data) != 2:
        raise MalformedFrameError(f"Frame is not a [task, payload] pair: {frame[:80]!r}")

    task, payload = data
    if not isinstance(task, str):
        raise MalformedFrameError(f"Task name must be a string, got {type(task).__name__}")

    return Message(task=task, payload=payload)
