"""
Typed facade over the clef account_* API.

One method per remote operation. Every call is a single blocking round trip
through the configured transport; nothing is retried or cached. Transport
and protocol errors propagate unchanged, a result of the wrong shape raises
DecodeError.

Example:

    with ClefClient.ipc("/home/me/.clef/clef.ipc") as clef:
        accounts = clef.list_accounts()
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from .config import get_ipc_path, get_rpc_url, get_timeout, load_env
from .errors import DecodeError
from .models import (
    EcRecoverRequest,
    EcRecoverResponse,
    SignDataRequest,
    SignDataResponse,
    SignTxResponse,
    Transaction,
    TypedDataRequest,
    VersionResponse,
)
from .transport import HTTPTransport, IPCTransport, Transport

METHOD_NEW_ACCOUNT = "account_new"
METHOD_LIST_ACCOUNTS = "account_list"
METHOD_SIGN_TRANSACTION = "account_signTransaction"
METHOD_SIGN_DATA = "account_signData"
METHOD_SIGN_TYPED_DATA = "account_signTypedData"
METHOD_EC_RECOVER = "account_ecRecover"
METHOD_VERSION = "account_version"


class ClefClient:
    """Client for a clef signer. Owns exactly one transport."""

    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    # ============ Constructors ============

    @classmethod
    def http(cls, url: str, **kwargs: Any) -> "ClefClient":
        return cls(HTTPTransport(url, **kwargs))

    @classmethod
    def ipc(cls, path: Union[str, Path], **kwargs: Any) -> "ClefClient":
        """Connect over a unix socket. Raises ConnectError if the signer is unreachable."""
        return cls(IPCTransport(path, **kwargs))

    @classmethod
    def from_env(cls, env_path: Optional[Union[str, Path]] = None) -> "ClefClient":
        """
        Build a client from CLEF_* settings.

        IPC is used when CLEF_IPC_PATH is set, HTTP (CLEF_RPC_URL) otherwise.
        """
        load_env(env_path)
        timeout = get_timeout()
        ipc_path = get_ipc_path()
        if ipc_path:
            return cls.ipc(ipc_path, timeout=timeout)
        return cls.http(get_rpc_url(), timeout=timeout)

    # ============ Lifecycle ============

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> "ClefClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ============ Operations ============

    def _call(self, method: str, params: Any = None) -> Any:
        response = self.transport.call(method, params)
        return response.raise_for_error().result

    def new_account(self) -> str:
        """Create a new account and return its address."""
        result = self._call(METHOD_NEW_ACCOUNT)
        if not isinstance(result, str):
            raise DecodeError(f"{METHOD_NEW_ACCOUNT}: expected an address string")
        return result

    def list_accounts(self) -> list[str]:
        result = self._call(METHOD_LIST_ACCOUNTS)
        if not isinstance(result, list) or not all(isinstance(a, str) for a in result):
            raise DecodeError(f"{METHOD_LIST_ACCOUNTS}: expected a list of address strings")
        return result

    def sign_transaction(self, tx: Transaction) -> SignTxResponse:
        """Sign ``tx``; returns the raw signed transaction and its decoded fields."""
        return SignTxResponse.from_dict(self._call(METHOD_SIGN_TRANSACTION, tx))

    def sign_data(self, request: SignDataRequest) -> SignDataResponse:
        return SignDataResponse.from_dict(self._call(METHOD_SIGN_DATA, request))

    def sign_typed_data(self, request: TypedDataRequest) -> SignDataResponse:
        return SignDataResponse.from_dict(self._call(METHOD_SIGN_TYPED_DATA, request))

    def ec_recover(self, request: EcRecoverRequest) -> EcRecoverResponse:
        """Recover the signer address from data + signature."""
        return EcRecoverResponse.from_dict(self._call(METHOD_EC_RECOVER, request))

    def version(self) -> VersionResponse:
        return VersionResponse.from_dict(self._call(METHOD_VERSION))

    def __repr__(self) -> str:
        return f"ClefClient({self.transport!r})"
