import sys
from typing import Any, Dict, Optional, TextIO

from .dispatcher import Dispatcher, ServerInfo
from .protocol import INTERNAL_ERROR, ProtocolError, make_error, parse_message, scalar_id, serialize_message
from .registry import ToolRegistry
from .shared.config import DEFAULT_SERVER_NAME, DEFAULT_SERVER_VERSION
from .shared.logging import get_logger

logger = get_logger(__name__)


class StdioServer:
    """Newline-delimited JSON-RPC over a pair of text streams.

    Every non-blank input line gets exactly one response line; only end of
    input stops the loop.
    """

    def __init__(
        self,
        tools: Optional[ToolRegistry] = None,
        server_info: Optional[ServerInfo] = None,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
    ) -> None:
        self.tools = tools if tools is not None else ToolRegistry()
        self.server_info = server_info or ServerInfo(DEFAULT_SERVER_NAME, DEFAULT_SERVER_VERSION)
        self.dispatcher = Dispatcher(self.tools, self.server_info)
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout

    def run(self) -> None:
        """Long-lived loop, returns at EOF."""
        logger.info("Serving %d tools over stdio", len(self.tools))
        while self.serve_once():
            pass
        logger.info("Input closed, shutting down")

    def serve_once(self) -> bool:
        """Answer the next non-blank line. Returns False at EOF or when stdout is gone."""
        while True:
            line = self._stdin.readline()
            if line == "":
                return False  # EOF
            if line.strip():
                break
        response = self.handle_line(line)
        return self._write(response)

    def handle_line(self, line: str) -> Dict[str, Any]:
        request_id: Any = None
        try:
            request = parse_message(line)
            request_id = request.id
            return self.dispatcher.dispatch(request)
        except ProtocolError as exc:
            logger.warning("Rejected input line: %s", exc)
            return make_error(None, exc.code, str(exc))
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unhandled error while dispatching")
            return make_error(scalar_id(request_id), INTERNAL_ERROR, f"Internal error: {exc}")

    def _write(self, response: Dict[str, Any]) -> bool:
        try:
            serialized = serialize_message(response)
        except (TypeError, ValueError) as exc:
            logger.exception("Failed to serialize response")
            fallback = make_error(scalar_id(response.get("id")), INTERNAL_ERROR, f"Internal error: {exc}")
            serialized = serialize_message(fallback)
        try:
            self._stdout.write(serialized)
            self._stdout.flush()
        except (BrokenPipeError, OSError) as exc:
            logger.error("Failed to write response: %s", exc)
            return False
        return True
