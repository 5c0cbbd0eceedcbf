from __future__ import annotations

"""
Simple TCP REPL server for Kons.

Protocol: JSON per line over TCP.
- Request: {"cmd": "eval", "code": "(begin ...)"}
- Response: {"ok": true, "result": <rendered value>}
  or {"ok": false, "error": <message>, "line": <n>, "column": <n>}

Definitions persist across requests and clients: one Interpreter is kept
alive and evaluation is serialized through a lock.
"""

import json
import logging
import socket
import threading
from typing import Any, Dict, Optional, Tuple

from kons import config
from kons.interpreter import Interpreter
from kons.types.value import Error

logger = logging.getLogger(__name__)

# longest request line accepted before the client is dropped
MAX_LINE = 1 << 20


class ReplServer:
    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        prelude='auto',
        max_line: int = MAX_LINE,
    ):
        default_host, default_port = config.get_repl_address()
        self.host = host if host is not None else default_host
        self.port = port if port is not None else default_port
        self.interp = Interpreter(prelude=prelude)
        self._lock = threading.Lock()
        self.max_line = max_line

    def serve_forever(self):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            s.bind((self.host, self.port))
            s.listen(5)
            logger.info("REPL listening on %s:%d", self.host, self.port)
            while True:
                conn, addr = s.accept()
                threading.Thread(target=self._handle_client, args=(conn, addr), daemon=True).start()

    def evaluate(self, code: str) -> Dict[str, Any]:
        try:
            with self._lock:
                value = self.interp.eval(code)
        except Exception as ex:
            logger.exception("evaluation failed")
            return {"ok": False, "error": str(ex)}
        if isinstance(value, Error):
            resp: Dict[str, Any] = {"ok": False, "error": value.message}
            if value.token is not None:
                resp.update(line=value.token.line, column=value.token.column)
            return resp
        return {"ok": True, "result": str(value)}

    def handle_request(self, line: bytes) -> Dict[str, Any]:
        try:
            req = json.loads(line.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as ex:
            return {"ok": False, "error": f"Invalid request: {ex}"}
        if not isinstance(req, dict):
            return {"ok": False, "error": "Invalid request: expected a JSON object"}
        if req.get("cmd") != "eval":
            return {"ok": False, "error": f"Unknown cmd: {req.get('cmd')}"}
        code = req.get("code", "")
        if not isinstance(code, str):
            return {"ok": False, "error": "Invalid request: code must be a string"}
        return self.evaluate(code)

    def _handle_client(self, conn: socket.socket, addr: Tuple[str, int]):
        logger.info("client connected from %s:%d", *addr)
        with conn:
            buf = b""
            while True:
                data = conn.recv(4096)
                if not data:
                    break
                buf += data
                while b"\n" in buf:
                    line, buf = buf.split(b"\n", 1)
                    line = line.strip()
                    if not line:
                        continue
                    resp = self.handle_request(line)
                    conn.sendall((json.dumps(resp) + "\n").encode("utf-8"))
                if len(buf) > self.max_line:
                    resp = {"ok": False, "error": f"Invalid request: line exceeds {self.max_line} bytes"}
                    conn.sendall((json.dumps(resp) + "\n").encode("utf-8"))
                    break
        logger.info("client %s:%d disconnected", *addr)


def main() -> None:
    config.configure_logging()
    ReplServer().serve_forever()


if __name__ == "__main__":
    main()
