"""Configuration tests: .env loading and environment accessors."""

from __future__ import annotations

from pathlib import Path

import pytest

from clefclient import ClefClient, HTTPTransport, IPCTransport
from clefclient.config import (
    DEFAULT_RPC_URL,
    DEFAULT_TIMEOUT,
    get_ipc_path,
    get_rpc_url,
    get_timeout,
    load_env,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("CLEF_RPC_URL", "CLEF_IPC_PATH", "CLEF_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    assert get_rpc_url() == DEFAULT_RPC_URL
    assert get_ipc_path() is None
    assert get_timeout() == DEFAULT_TIMEOUT


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CLEF_RPC_URL", "http://signer:9000")
    monkeypatch.setenv("CLEF_IPC_PATH", "/run/clef.ipc")
    monkeypatch.setenv("CLEF_TIMEOUT", "2.5")

    assert get_rpc_url() == "http://signer:9000"
    assert get_ipc_path() == "/run/clef.ipc"
    assert get_timeout() == 2.5


def test_invalid_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CLEF_TIMEOUT", "soon")
    with pytest.raises(ValueError, match="CLEF_TIMEOUT"):
        get_timeout()


def test_load_env_missing_file(tmp_path: Path) -> None:
    assert load_env(tmp_path / ".env") is False


def test_from_env_builds_http_client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_path = tmp_path / ".env"
    env_path.write_text("CLEF_RPC_URL=http://signer:8550\nCLEF_TIMEOUT=3\n", encoding="utf-8")
    # load_dotenv writes into os.environ; register the keys so monkeypatch restores them.
    monkeypatch.setenv("CLEF_RPC_URL", "placeholder")
    monkeypatch.setenv("CLEF_TIMEOUT", "placeholder")

    client = ClefClient.from_env(env_path)

    assert isinstance(client.transport, HTTPTransport)
    assert client.transport.url == "http://signer:8550"
    assert client.transport.timeout == 3.0


def test_from_env_prefers_ipc(fake_signer, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    signer = fake_signer(lambda request: b"")
    monkeypatch.setenv("CLEF_IPC_PATH", str(signer.path))

    client = ClefClient.from_env(tmp_path / "absent.env")
    try:
        assert isinstance(client.transport, IPCTransport)
        assert client.transport.path == str(signer.path)
    finally:
        client.close()


def test_load_env_accepts_str_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_path = tmp_path / ".env"
    env_path.write_text("CLEF_IPC_PATH=/run/clef/clef.ipc\n", encoding="utf-8")
    monkeypatch.setenv("CLEF_IPC_PATH", "placeholder")

    assert load_env(str(env_path)) is True
    assert get_ipc_path() == "/run/clef/clef.ipc"
    assert load_env(str(tmp_path / "missing.env")) is False
