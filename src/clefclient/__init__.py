"""
clefclient - JSON-RPC client for the clef external signer.

Speaks the account_* API over HTTP or a local unix socket. Payloads
(transactions, typed data) are shuttled as-is and never interpreted.
"""
__all__ = [
    # Client
    "ClefClient",
    # Transports
    "HTTPTransport",
    "IPCTransport",
    "Transport",
    # Requests
    "Transaction",
    "SignDataRequest",
    "TypedDataRequest",
    "EcRecoverRequest",
    # Results
    "SignTxResponse",
    "SignedTransaction",
    "SignDataResponse",
    "EcRecoverResponse",
    "VersionResponse",
    # Envelopes
    "RpcRequest",
    "RpcResponse",
    "RpcError",
    # Errors
    "ClefError",
    "TransportError",
    "ConnectError",
    "ProtocolError",
    "DecodeError",
]

from .client import ClefClient
from .errors import ClefError, ConnectError, DecodeError, ProtocolError, TransportError
from .models import (
    EcRecoverRequest,
    EcRecoverResponse,
    RpcError,
    RpcRequest,
    RpcResponse,
    SignDataRequest,
    SignDataResponse,
    SignedTransaction,
    SignTxResponse,
    Transaction,
    TypedDataRequest,
    VersionResponse,
)
from .transport import HTTPTransport, IPCTransport, Transport
