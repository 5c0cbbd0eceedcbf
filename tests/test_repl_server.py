import json
import socket
import threading

import pytest

from kons_lsp.repl_server import ReplServer


@pytest.fixture
def server():
    return ReplServer(host="127.0.0.1", port=0, prelude=None)


def _req(**kw):
    return json.dumps(kw).encode("utf-8")


def test_defaults_from_config(monkeypatch):
    monkeypatch.setenv("KONS_REPL_PORT", "7001")
    srv = ReplServer(prelude=None)
    assert (srv.host, srv.port) == ("127.0.0.1", 7001)


def test_eval_ok(server):
    assert server.handle_request(_req(cmd="eval", code="(+ 1 2)")) == {"ok": True, "result": "3.0"}


def test_state_persists_between_requests(server):
    server.handle_request(_req(cmd="eval", code="(define x 5)"))
    assert server.handle_request(_req(cmd="eval", code="(* x x)")) == {"ok": True, "result": "25.0"}


def test_result_renders_values(server):
    resp = server.handle_request(_req(cmd="eval", code="'(a \"b\" . 1)"))
    assert resp == {"ok": True, "result": '(a "b" . 1.0)'}


def test_runtime_error_has_position(server):
    resp = server.handle_request(_req(cmd="eval", code="\n  nope"))
    assert resp == {"ok": False, "error": "no such binding: nope", "line": 1, "column": 2}


def test_parse_error(server):
    resp = server.handle_request(_req(cmd="eval", code="(a . b c)"))
    assert resp["ok"] is False
    assert resp["error"] == "expected end of dotted pair"
    assert (resp["line"], resp["column"]) == (0, 7)


@pytest.mark.parametrize(
    "line,fragment",
    [
        (b"not json", "Invalid request"),
        (b"[1, 2]", "Invalid request"),
        (b"\xff\xfe", "Invalid request"),
        (_req(cmd="run", code="1"), "Unknown cmd"),
        (_req(cmd="eval", code=5), "code must be a string"),
    ],
)
def test_bad_requests(server, line, fragment):
    resp = server.handle_request(line)
    assert resp["ok"] is False
    assert fragment in resp["error"]


def test_empty_code_answers_null(server):
    assert server.handle_request(_req(cmd="eval")) == {"ok": True, "result": "()"}


def test_round_trip_over_socket(server):
    a, b = socket.socketpair()
    t = threading.Thread(target=server._handle_client, args=(b, ("127.0.0.1", 0)), daemon=True)
    t.start()
    with a:
        a.sendall(_req(cmd="eval", code="(define y 2)") + b"\n\n" + _req(cmd="eval", code="(+ y 1)") + b"\n")
        reader = a.makefile("r", encoding="utf-8")
        first = json.loads(reader.readline())
        second = json.loads(reader.readline())
        reader.close()
    t.join(timeout=5)
    assert first == {"ok": True, "result": "()"}
    assert second == {"ok": True, "result": "3.0"}


def test_unexpected_exception_becomes_error_response(server, monkeypatch):
    def explode(code):
        raise RuntimeError("boom")

    monkeypatch.setattr(server.interp, "eval", explode)
    assert server.handle_request(_req(cmd="eval", code="1")) == {"ok": False, "error": "boom"}


def test_dotted_call_over_the_wire(server):
    assert server.handle_request(_req(cmd="eval", code="(+ . 1)")) == {"ok": True, "result": "0.0"}


def test_overlong_line_is_rejected_and_dropped():
    srv = ReplServer(host="127.0.0.1", port=0, prelude=None, max_line=16)
    a, b = socket.socketpair()
    t = threading.Thread(target=srv._handle_client, args=(b, ("127.0.0.1", 0)), daemon=True)
    t.start()
    with a:
        a.sendall(b"x" * 64)
        reader = a.makefile("r", encoding="utf-8")
        resp = json.loads(reader.readline())
        # the server closes its end after answering
        assert reader.readline() == ""
        reader.close()
    t.join(timeout=5)
    assert resp["ok"] is False
    assert "exceeds 16 bytes" in resp["error"]
