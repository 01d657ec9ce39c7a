from __future__ import annotations


class ClefError(RuntimeError):
    pass


class TransportError(ClefError):
    """The channel to the signer failed (connect, socket, HTTP, malformed bytes)."""


class ConnectError(TransportError):
    pass


class ProtocolError(ClefError):
    """The signer answered with a populated JSON-RPC error record."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


class DecodeError(ClefError):
    """The result payload does not have the shape the operation expects."""


__all__ = [
    "ClefError",
    "ConnectError",
    "DecodeError",
    "ProtocolError",
    "TransportError",
]
