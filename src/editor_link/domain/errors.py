class EditorLinkError(Exception):
    pass


class TransportError(EditorLinkError):
    """The relay connection could not be opened, written to, or was lost."""


class MalformedFrameError(EditorLinkError):
    """Wire data that does not decode to a ``[task, payload]`` pair."""


class MalformedMessageError(EditorLinkError):
    """A decoded message whose payload lacks the fields its task requires."""


class PreconditionError(EditorLinkError):
    """An operation was attempted in a connection state that forbids it."""
