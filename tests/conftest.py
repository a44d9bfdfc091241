from __future__ import annotations

import json
import logging
import os
import socket
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List

import pytest

import gelfsend.api as gelfsend_api
from gelfsend.config import loader
from gelfsend.config.schema import TargetConfig
from gelfsend.core.compression import decompress
from gelfsend.core.manager import GLOBAL_MANAGER


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    user_dir = tmp_path / "user-config"
    monkeypatch.setattr(loader, "user_config_dir", lambda _: str(user_dir))
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    for key in list(os.environ):
        if key.startswith("GELFSEND__"):
            monkeypatch.delenv(key)
    yield workdir


@pytest.fixture(autouse=True)
def reset_gelfsend() -> Iterator[None]:
    yield
    GLOBAL_MANAGER.shutdown()
    gelfsend_api._CONFIGURED = False
    root = logging.getLogger()
    root.handlers = []
    root.setLevel(logging.NOTSET)


class Receiver:
    """UDP socket standing in for a GELF collector."""

    def __init__(self) -> None:
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.sock.setsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF, 1 << 20)
        self.sock.bind(("127.0.0.1", 0))
        self.sock.settimeout(5.0)
        self.host, self.port = self.sock.getsockname()

    def target(self, **kwargs: Any) -> TargetConfig:
        kwargs.setdefault("origin_host", "node1")
        return TargetConfig(host=self.host, port=self.port, **kwargs)

    def recv(self, timeout: float = 5.0) -> bytes:
        self.sock.settimeout(timeout)
        data, _ = self.sock.recvfrom(65536)
        return data

    def recv_many(self, count: int) -> List[bytes]:
        return [self.recv() for _ in range(count)]

    def recv_json(self) -> Dict[str, Any]:
        return json.loads(decompress(self.recv()).decode("utf-8"))

    def assert_silent(self, timeout: float = 0.3) -> None:
        self.sock.settimeout(timeout)
        with pytest.raises(socket.timeout):
            self.sock.recvfrom(65536)

    def close(self) -> None:
        self.sock.close()


@pytest.fixture
def receiver() -> Iterator[Receiver]:
    recv = Receiver()
    try:
        yield recv
    finally:
        recv.close()


@pytest.fixture
def incompressible_text() -> Callable[[int], str]:
    import random
    import string

    def factory(size: int, seed: int = 1234) -> str:
        rng = random.Random(seed)
        alphabet = string.ascii_letters + string.digits
        return "".join(rng.choice(alphabet) for _ in range(size))

    return factory
