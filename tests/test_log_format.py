import logging
import sys

from editor_link.log_format import BOLD, CYAN, ColoredFormatter


def _record(msg: str, level: int = logging.INFO, exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="editor_link.domain.connection",
        level=level,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


class TestColoredFormatter:
    def test_state_transitions_are_highlighted(self):
        line = ColoredFormatter().format(_record("Connection: CONNECTING -> OPEN"))
        assert f"{BOLD}{CYAN}Connection: CONNECTING -> OPEN" in line

    def test_uses_last_logger_name_component(self):
        line = ColoredFormatter().format(_record("hello"))
        assert "connection" in line
        assert "editor_link.domain" not in line

    def test_includes_traceback(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            exc_info = sys.exc_info()
        line = ColoredFormatter().format(_record("failed", logging.ERROR, exc_info))
        assert "RuntimeError: boom" in line
