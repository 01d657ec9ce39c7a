"""Shared fixtures: an in-memory transport double and a unix-socket fake signer."""

from __future__ import annotations

import json
import shutil
import socket
import tempfile
import threading
from pathlib import Path
from typing import Any, Callable, Iterator, Optional

import pytest

from clefclient.models import RpcRequest, RpcResponse
from clefclient.transport import build_request


class FakeTransport:
    """
    Transport double. Records every request and answers with a canned envelope.

    The envelope is returned as-is, error record included, so callers are
    responsible for noticing it.
    """

    def __init__(self, response: RpcResponse) -> None:
        self.response = response
        self.requests: list[RpcRequest] = []
        self.closed = False

    def call(self, method: str, params: Any = None) -> RpcResponse:
        self.requests.append(build_request(method, params))
        return self.response

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def fake_transport() -> Callable[..., FakeTransport]:
    def _make(result: Any = None, error: Optional[dict[str, Any]] = None) -> FakeTransport:
        return FakeTransport(RpcResponse.from_dict({"jsonrpc": "2.0", "result": result, "error": error, "id": 1}))

    return _make


class FakeSigner:
    """
    Minimal unix-socket signer for a single connection.

    ``handler`` maps each decoded request to the raw bytes written back.
    Raw request bytes are kept in ``received`` for framing assertions.
    """

    def __init__(self, path: Path, handler: Callable[[RpcRequest], bytes]) -> None:
        self.path = path
        self.handler = handler
        self.received = bytearray()
        self.requests: list[RpcRequest] = []
        self._listener = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self._listener.bind(str(path))
        self._listener.listen(1)
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self) -> None:
        try:
            conn, _ = self._listener.accept()
        except OSError:
            return
        with conn:
            pending = b""
            while True:
                chunk = conn.recv(4096)
                if not chunk:
                    return
                self.received.extend(chunk)
                pending += chunk
                while b"\n" in pending:
                    line, pending = pending.split(b"\n", 1)
                    request = RpcRequest.decode(line)
                    self.requests.append(request)
                    conn.sendall(self.handler(request))

    def stop(self) -> None:
        self._listener.close()
        self._thread.join(timeout=2)


@pytest.fixture()
def socket_dir() -> Iterator[Path]:
    # Short path: AF_UNIX addresses are limited to ~100 bytes.
    path = Path(tempfile.mkdtemp(prefix="clef-"))
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture()
def fake_signer(socket_dir: Path) -> Iterator[Callable[[Callable[[RpcRequest], bytes]], FakeSigner]]:
    signers: list[FakeSigner] = []

    def _start(handler: Callable[[RpcRequest], bytes]) -> FakeSigner:
        signer = FakeSigner(socket_dir / "clef.ipc", handler)
        signers.append(signer)
        return signer

    yield _start
    for signer in signers:
        signer.stop()
