"""
Wire records for the clef JSON-RPC interface.

Envelopes (request / response / error) plus the typed request and result
shapes of the account_* methods. Hex quantities and typed-data payloads are
carried as-is; nothing here interprets them.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

from .errors import DecodeError, ProtocolError

JSONRPC_VERSION = "2.0"
DEFAULT_REQUEST_ID = 1


def _dumps(payload: Any) -> bytes:
    return json.dumps(payload, separators=(",", ":")).encode("utf-8")


def _expect_object(payload: Any, what: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise DecodeError(f"{what}: expected a JSON object, got {type(payload).__name__}")
    return payload


def _expect_str(payload: dict[str, Any], key: str, what: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str):
        raise DecodeError(f"{what}: field '{key}' must be a string")
    return value


def _optional_str(payload: dict[str, Any], key: str, what: str) -> Optional[str]:
    value = payload.get(key)
    if value is not None and not isinstance(value, str):
        raise DecodeError(f"{what}: field '{key}' must be a string or null")
    return value


def _put_if_set(target: dict[str, Any], key: str, value: Optional[str]) -> None:
    # Unset means None or "", mirroring omitempty on the signer side.
    if value:
        target[key] = value


# ============ Envelopes ============


@dataclass(frozen=True)
class RpcRequest:
    method: str
    params: Any = None
    id: int = DEFAULT_REQUEST_ID
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"jsonrpc": self.jsonrpc, "method": self.method}
        if self.params is not None:
            result["params"] = self.params
        result["id"] = self.id
        return result

    def encode(self) -> bytes:
        return _dumps(self.to_dict())

    @classmethod
    def from_dict(cls, payload: Any) -> "RpcRequest":
        payload = _expect_object(payload, "request")
        method = _expect_str(payload, "method", "request")
        request_id = payload.get("id", DEFAULT_REQUEST_ID)
        if not isinstance(request_id, int) or isinstance(request_id, bool):
            raise DecodeError("request: field 'id' must be an integer")
        return cls(
            method=method,
            params=payload.get("params"),
            id=request_id,
            jsonrpc=payload.get("jsonrpc", JSONRPC_VERSION),
        )

    @classmethod
    def decode(cls, raw: bytes | str) -> "RpcRequest":
        try:
            payload = json.loads(raw)
        except ValueError as exc:
            raise DecodeError(f"request is not valid JSON: {exc}") from exc
        return cls.from_dict(payload)


@dataclass(frozen=True)
class RpcError:
    code: int
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}

    @classmethod
    def from_dict(cls, payload: Any) -> "RpcError":
        payload = _expect_object(payload, "error record")
        code = payload.get("code")
        if not isinstance(code, int) or isinstance(code, bool):
            raise DecodeError("error record: field 'code' must be an integer")
        message = payload.get("message", "")
        if not isinstance(message, str):
            raise DecodeError("error record: field 'message' must be a string")
        return cls(code=code, message=message)


@dataclass(frozen=True)
class RpcResponse:
    """
    Decoded response envelope.

    ``result`` is the raw JSON value; it is only meaningful when ``error``
    is None. Callers go through :meth:`raise_for_error` before reading it.
    """

    result: Any = None
    error: Optional[RpcError] = None
    id: Optional[int] = DEFAULT_REQUEST_ID
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict[str, Any]:
        return {
            "jsonrpc": self.jsonrpc,
            "result": self.result,
            "error": self.error.to_dict() if self.error is not None else None,
            "id": self.id,
        }

    @classmethod
    def from_dict(cls, payload: Any) -> "RpcResponse":
        payload = _expect_object(payload, "response")
        raw_error = payload.get("error")
        error = RpcError.from_dict(raw_error) if raw_error is not None else None
        return cls(
            result=payload.get("result"),
            error=error,
            id=payload.get("id"),
            jsonrpc=payload.get("jsonrpc", JSONRPC_VERSION),
        )

    def raise_for_error(self) -> "RpcResponse":
        if self.error is not None:
            raise ProtocolError(self.error.code, self.error.message)
        return self


# ============ Requests ============


@dataclass(frozen=True)
class Transaction:
    """
    Transaction to be signed by account_signTransaction.

    Attributes:
        from_: Sender address (serialized as ``from``)
        to: Recipient address; None for contract creation
        gas, gas_price, value, nonce: Hex quantities
        data: Hex calldata
    """
    from_: str
    to: Optional[str] = None
    gas: Optional[str] = None
    gas_price: Optional[str] = None
    value: Optional[str] = None
    nonce: Optional[str] = None
    data: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"from": self.from_}
        _put_if_set(result, "to", self.to)
        _put_if_set(result, "gas", self.gas)
        _put_if_set(result, "gasPrice", self.gas_price)
        _put_if_set(result, "value", self.value)
        _put_if_set(result, "nonce", self.nonce)
        _put_if_set(result, "data", self.data)
        return result


@dataclass(frozen=True)
class SignDataRequest:
    address: str
    data: str

    def to_dict(self) -> dict[str, Any]:
        return {"address": self.address, "data": self.data}


@dataclass(frozen=True)
class TypedDataRequest:
    """Typed-data signing request. ``typed_data`` is forwarded verbatim."""

    address: str
    typed_data: Any
    raw_version: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"address": self.address, "data": self.typed_data}
        _put_if_set(result, "raw_version", self.raw_version)
        return result


@dataclass(frozen=True)
class EcRecoverRequest:
    data: str
    signature: str

    def to_dict(self) -> dict[str, Any]:
        return {"data": self.data, "sig": self.signature}


# ============ Results ============


@dataclass(frozen=True)
class SignedTransaction:
    nonce: Optional[str] = None
    gas_price: Optional[str] = None
    gas: Optional[str] = None
    to: Optional[str] = None
    value: Optional[str] = None
    input: Optional[str] = None
    v: Optional[str] = None
    r: Optional[str] = None
    s: Optional[str] = None
    hash: Optional[str] = None

    _WIRE_KEYS = (
        ("nonce", "nonce"),
        ("gas_price", "gasPrice"),
        ("gas", "gas"),
        ("to", "to"),
        ("value", "value"),
        ("input", "input"),
        ("v", "v"),
        ("r", "r"),
        ("s", "s"),
        ("hash", "hash"),
    )

    def to_dict(self) -> dict[str, Any]:
        return {wire: getattr(self, attr) for attr, wire in self._WIRE_KEYS}

    @classmethod
    def from_dict(cls, payload: Any) -> "SignedTransaction":
        payload = _expect_object(payload, "signed transaction")
        return cls(**{
            attr: _optional_str(payload, wire, "signed transaction")
            for attr, wire in cls._WIRE_KEYS
        })


@dataclass(frozen=True)
class SignTxResponse:
    raw: str
    tx: SignedTransaction

    def to_dict(self) -> dict[str, Any]:
        return {"raw": self.raw, "tx": self.tx.to_dict()}

    @classmethod
    def from_dict(cls, payload: Any) -> "SignTxResponse":
        payload = _expect_object(payload, "account_signTransaction result")
        raw = _expect_str(payload, "raw", "account_signTransaction result")
        return cls(raw=raw, tx=SignedTransaction.from_dict(payload.get("tx")))


@dataclass(frozen=True)
class SignDataResponse:
    signature: str

    def to_dict(self) -> dict[str, Any]:
        return {"signature": self.signature}

    @classmethod
    def from_dict(cls, payload: Any) -> "SignDataResponse":
        payload = _expect_object(payload, "signature result")
        return cls(signature=_expect_str(payload, "signature", "signature result"))


@dataclass(frozen=True)
class EcRecoverResponse:
    address: str

    def to_dict(self) -> dict[str, Any]:
        return {"address": self.address}

    @classmethod
    def from_dict(cls, payload: Any) -> "EcRecoverResponse":
        payload = _expect_object(payload, "account_ecRecover result")
        return cls(address=_expect_str(payload, "address", "account_ecRecover result"))


@dataclass(frozen=True)
class VersionResponse:
    version: str

    def to_dict(self) -> dict[str, Any]:
        return {"version": self.version}

    @classmethod
    def from_dict(cls, payload: Any) -> "VersionResponse":
        payload = _expect_object(payload, "account_version result")
        return cls(version=_expect_str(payload, "version", "account_version result"))


__all__ = [
    "DEFAULT_REQUEST_ID",
    "JSONRPC_VERSION",
    "EcRecoverRequest",
    "EcRecoverResponse",
    "RpcError",
    "RpcRequest",
    "RpcResponse",
    "SignDataRequest",
    "SignDataResponse",
    "SignTxResponse",
    "SignedTransaction",
    "Transaction",
    "TypedDataRequest",
    "VersionResponse",
]
