"""pytest 配置和共享 fixtures。pytest configuration and shared fixtures."""

from __future__ import annotations

import logging
import socket
import sys
import tempfile
import threading
import time
from pathlib import Path
from typing import Generator, Iterable

import pytest

# 添加项目根目录到路径，以便导入 main 模块
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from potassium.tools import delivery
from potassium.tools.delivery import ConnectFailure


class FakeSocket:
    """Stand-in for a connected socket that records writes."""

    def __init__(self, port: int, fail_send: bool = False) -> None:
        self.port = port
        self.fail_send = fail_send
        self.sent: list[bytes] = []
        self.closed = False

    def sendall(self, data: bytes) -> None:
        if self.fail_send:
            raise BrokenPipeError(32, "Broken pipe")
        self.sent.append(bytes(data))

    def close(self) -> None:
        self.closed = True


class FakeNetwork:
    """Replacement for :func:`delivery.open_connection` with scripted ports."""

    def __init__(self, reachable: Iterable[int] = (), broken: Iterable[int] = ()) -> None:
        self.reachable = set(reachable)
        self.broken = set(broken)
        self.attempted: list[int] = []
        self.sockets: list[FakeSocket] = []

    def __call__(self, host: str, port: int, timeout_s: float) -> FakeSocket:
        self.attempted.append(port)
        if port not in self.reachable and port not in self.broken:
            raise ConnectFailure(port, f"Cannot connect to port {port}: [Errno 111] Connection refused")
        sock = FakeSocket(port, fail_send=port in self.broken)
        self.sockets.append(sock)
        return sock

    def sent_to(self, port: int) -> bytes:
        return b"".join(b"".join(s.sent) for s in self.sockets if s.port == port)


class LoopbackListener:
    """A real TCP listener on 127.0.0.1 that stores what each client sends."""

    def __init__(self) -> None:
        self._server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._server.bind(("127.0.0.1", 0))
        self._server.listen(8)
        self._server.settimeout(0.2)
        self.port: int = self._server.getsockname()[1]
        self.received: list[bytes] = []
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._serve, daemon=True)

    def start(self) -> "LoopbackListener":
        self._thread.start()
        return self

    def _serve(self) -> None:
        while not self._stop.is_set():
            try:
                conn, _ = self._server.accept()
            except socket.timeout:
                continue
            except OSError:
                break
            with conn:
                conn.settimeout(2.0)
                chunks = []
                while True:
                    try:
                        data = conn.recv(65536)
                    except OSError:
                        break
                    if not data:
                        break
                    chunks.append(data)
            with self._lock:
                self.received.append(b"".join(chunks))

    def wait_for(self, count: int, timeout: float = 2.0) -> list[bytes]:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            with self._lock:
                if len(self.received) >= count:
                    return list(self.received)
            time.sleep(0.02)
        with self._lock:
            return list(self.received)

    def stop(self) -> None:
        self._stop.set()
        self._server.close()
        self._thread.join(timeout=1)


def _get_free_port() -> int:
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    except PermissionError as exc:
        pytest.skip(f"Socket creation blocked in test environment: {exc}")
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """临时目录 fixture。Temporary directory fixture."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def listener() -> Generator[LoopbackListener, None, None]:
    """真实回环监听器 fixture。Real loopback listener fixture."""
    try:
        server = LoopbackListener().start()
    except PermissionError as exc:
        pytest.skip(f"Socket creation blocked in test environment: {exc}")
    try:
        yield server
    finally:
        server.stop()


@pytest.fixture
def closed_port() -> int:
    """没有监听者的端口。A loopback port nobody listens on."""
    return _get_free_port()


@pytest.fixture
def fake_network(monkeypatch: pytest.MonkeyPatch) -> FakeNetwork:
    """模拟网络 fixture；测试中设置 ``reachable`` / ``broken``。"""
    network = FakeNetwork()
    monkeypatch.setattr(delivery, "open_connection", network)
    return network


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """移除会影响连接参数的环境变量。"""
    for key in ("POTASSIUM_CONNECT_TIMEOUT_MS", "POTASSIUM_HOST"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def isolated_logging() -> Generator[None, None, None]:
    """每个测试结束后移除 ``potassium`` logger 上新增的 handler。"""
    logger = logging.getLogger("potassium")
    before = list(logger.handlers)
    level = logger.level
    yield
    for handler in logger.handlers:
        if handler not in before:
            handler.close()
    logger.handlers = before
    logger.setLevel(level)
