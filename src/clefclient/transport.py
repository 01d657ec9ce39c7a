"""
Transports for the clef JSON-RPC interface.

Both variants share envelope construction and error translation
(:func:`build_request` / :func:`parse_response`) and differ only in how
bytes reach the signer:

- HTTPTransport: one self-contained POST per call (httpx).
- IPCTransport: a persistent unix socket; requests are newline-terminated
  JSON, responses are read as exactly one JSON value.

An IPCTransport relies on strict request/response alternation over a single
ordered stream. It is not safe for concurrent use without external
serialization.
"""

from __future__ import annotations

import codecs
import json
import logging
import re
import socket
from pathlib import Path
from typing import Any, Optional, Protocol, Union

import httpx

from .errors import ConnectError, DecodeError, TransportError
from .models import RpcRequest, RpcResponse

logger = logging.getLogger(__name__)

DEFAULT_HTTP_TIMEOUT = 30.0
MAX_RESPONSE_SIZE = 16 * 1024 * 1024
_RECV_CHUNK = 65536
_JSON = json.JSONDecoder()
_NUMBER_TAIL = re.compile(r"[-+.eE0-9]*\Z")
_LITERALS = ("true", "false", "null", "NaN", "Infinity", "-Infinity")


def _is_truncated(text: str, exc: json.JSONDecodeError) -> bool:
    """
    Tell a value that has not fully arrived from one that can never decode.

    Truncation always surfaces at the tail of ``text``: an open string, a
    dangling escape, or a number / literal cut short.
    """
    if exc.msg.startswith("Unterminated string"):
        return True
    tail = text[exc.pos:]
    if exc.msg.startswith("Invalid \\uXXXX escape"):
        return len(tail) < 6
    if _NUMBER_TAIL.match(tail):
        return True
    return any(literal.startswith(tail) for literal in _LITERALS)


class Transport(Protocol):
    def call(self, method: str, params: Any = None) -> RpcResponse:
        ...

    def close(self) -> None:
        ...


def build_request(method: str, params: Any = None) -> RpcRequest:
    """Build the request envelope for ``method``; ``params`` records are flattened via to_dict()."""
    if hasattr(params, "to_dict"):
        params = params.to_dict()
    return RpcRequest(method=method, params=params)


def parse_response(payload: Any, request: RpcRequest, origin: str = "signer") -> RpcResponse:
    """
    Turn a decoded JSON body into a response envelope.

    Raises:
        TransportError: If the body is not a well-formed envelope
        ProtocolError: If the envelope carries an error record
    """
    try:
        response = RpcResponse.from_dict(payload)
    except DecodeError as exc:
        raise TransportError(f"malformed response from {origin}: {exc}") from exc

    if response.id != request.id:
        # Calls never overlap, so the envelope is still taken as the answer.
        logger.warning(
            "Response id %r does not match request id %r for %s",
            response.id, request.id, request.method,
        )

    return response.raise_for_error()


# ============ HTTP ============


class HTTPTransport:
    """
    JSON-RPC over HTTP POST.

    Args:
        url: Signer endpoint (e.g. http://localhost:8550)
        timeout: Per-request timeout in seconds
        headers: Extra headers sent with every request
        transport: Optional httpx transport (e.g. httpx.MockTransport)
    """

    def __init__(
        self,
        url: str,
        timeout: Optional[float] = DEFAULT_HTTP_TIMEOUT,
        headers: Optional[dict[str, str]] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.headers = dict(headers or {})
        self._transport = transport

    def call(self, method: str, params: Any = None) -> RpcResponse:
        request = build_request(method, params)
        logger.debug("POST %s -> %s", method, self.url)

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(self.url, json=request.to_dict(), headers=self.headers)
        except httpx.HTTPError as exc:
            raise TransportError(f"HTTP request to {self.url} failed: {exc}") from exc

        origin = f"{self.url} (HTTP {response.status_code})"
        try:
            payload = response.json()
        except ValueError as exc:
            raise TransportError(f"malformed response from {origin}: body is not JSON") from exc

        return parse_response(payload, request, origin=origin)

    def close(self) -> None:
        # Every call opens and releases its own connection.
        return None

    def __repr__(self) -> str:
        return f"HTTPTransport(url={self.url!r})"


# ============ IPC ============


class IPCTransport:
    """
    JSON-RPC over a local unix domain socket.

    The connection is established here; failure raises ConnectError and no
    transport is returned. There is no reconnect.
    """

    def __init__(self, path: Union[str, Path], timeout: Optional[float] = None) -> None:
        self.path = str(path)
        self._buffer = ""
        self._utf8 = codecs.getincrementaldecoder("utf-8")()

        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.settimeout(timeout)
            sock.connect(self.path)
        except OSError as exc:
            sock.close()
            raise ConnectError(f"failed to connect to {self.path}: {exc}") from exc

        self._sock: Optional[socket.socket] = sock
        logger.debug("Connected to signer at %s", self.path)

    @property
    def closed(self) -> bool:
        return self._sock is None

    def call(self, method: str, params: Any = None) -> RpcResponse:
        if self._sock is None:
            raise TransportError(f"IPC transport to {self.path} is closed")

        request = build_request(method, params)
        logger.debug("IPC %s -> %s", method, self.path)

        # After a failed exchange the stream is out of step; never reuse it.
        try:
            self._sock.sendall(request.encode() + b"\n")
            payload = self._read_value(self._sock)
        except OSError as exc:
            self.close()
            raise TransportError(f"IPC call to {self.path} failed: {exc}") from exc
        except TransportError:
            self.close()
            raise

        return parse_response(payload, request, origin=self.path)

    def close(self) -> None:
        if self._sock is None:
            return
        sock, self._sock = self._sock, None
        self._buffer = ""
        logger.debug("Closing IPC connection to %s", self.path)
        sock.close()

    def _read_value(self, sock: socket.socket) -> Any:
        """Read until exactly one JSON value is buffered; keep whatever follows it."""
        received = 0
        while True:
            text = self._buffer.lstrip()
            if text:
                if text[0] not in "{[":
                    raise TransportError(f"malformed response from {self.path}: {text[:32]!r}")
                try:
                    value, end = _JSON.raw_decode(text)
                except json.JSONDecodeError as exc:
                    if not _is_truncated(text, exc):
                        raise TransportError(f"malformed response from {self.path}: {exc}") from exc
                else:
                    self._buffer = text[end:]
                    return value

            chunk = sock.recv(_RECV_CHUNK)
            if not chunk:
                raise TransportError(
                    f"connection to {self.path} closed before a complete response was read"
                )
            received += len(chunk)
            try:
                self._buffer += self._utf8.decode(chunk)
            except UnicodeDecodeError as exc:
                raise TransportError(f"malformed response from {self.path}: {exc}") from exc
            if received > MAX_RESPONSE_SIZE:
                raise TransportError(
                    f"response from {self.path} exceeds {MAX_RESPONSE_SIZE} bytes"
                )

    def __repr__(self) -> str:
        state = "closed" if self._sock is None else "open"
        return f"IPCTransport(path={self.path!r}, {state})"


__all__ = [
    "DEFAULT_HTTP_TIMEOUT",
    "HTTPTransport",
    "IPCTransport",
    "MAX_RESPONSE_SIZE",
    "Transport",
    "build_request",
    "parse_response",
]
