"""边界操作测试。Boundary operation tests."""

from __future__ import annotations

import os
import zlib
from unittest.mock import patch

import pytest

from potassium import api


class TestDeliver:
    """deliver() 测试。"""

    def test_all_with_two_listeners(self, fake_network):
        fake_network.reachable = {8393, 8395}

        status = api.deliver("print(1)", "ALL")

        assert status == "Successfully executed on ports: 8393, 8395"
        assert zlib.decompress(fake_network.sent_to(8395)) == b"print(1)"

    def test_null_payload_is_probe(self, fake_network):
        fake_network.reachable = {8392}

        status = api.deliver("NULL", "8392")

        assert status == "Successfully connected to Opiumware on port: 8392"
        assert fake_network.sockets[0].sent == []

    def test_invalid_target_raises(self, fake_network):
        with pytest.raises(ValueError):
            api.deliver("print(1)", "eight")
        assert fake_network.attempted == []

    def test_no_listener_never_raises(self, fake_network):
        status = api.deliver("print(1)", "ALL")
        assert status.startswith("Failed to connect on all ports: Cannot connect to port 8397")

    def test_env_host_is_used(self, monkeypatch):
        seen = []

        def fake_open(host, port, timeout_s):
            seen.append((host, port, timeout_s))
            from potassium.tools.delivery import ConnectFailure

            raise ConnectFailure(port, f"Cannot connect to port {port}: refused")

        monkeypatch.setattr("potassium.tools.delivery.open_connection", fake_open)
        with patch.dict(
            os.environ,
            {"POTASSIUM_HOST": "127.0.0.2", "POTASSIUM_CONNECT_TIMEOUT_MS": "500"},
        ):
            api.deliver("print(1)", "8392")

        assert seen == [("127.0.0.2", 8392, 0.5)]


class TestAttachAndCheck:
    """attach() / check() / detach() 测试。"""

    def test_attach(self, fake_network):
        fake_network.reachable = {8396}
        assert api.attach() == "Successfully attached on port 8396"

    def test_attach_failure(self, fake_network):
        assert api.attach() == "Failed to attach: no Opiumware instance found on ports 8392-8397"

    def test_attach_to_port(self, fake_network):
        fake_network.reachable = {8393}
        assert api.attach_to_port("8393") == "Successfully connected to Opiumware on port: 8393"

    def test_check(self, fake_network):
        fake_network.reachable = {8397}
        assert api.check("8397") is True
        assert api.check("8392") is False

    def test_check_rejects_all(self):
        with pytest.raises(ValueError):
            api.check("ALL")

    def test_detach(self):
        assert api.detach("8394") == "Detached from port 8394"

    def test_port_status(self, fake_network):
        fake_network.reachable = {8392}
        status = api.port_status()
        assert status[8392] is True
        assert sum(status.values()) == 1


class TestInvalidTimeoutEnv:
    """超时环境变量无效时仍返回状态。"""

    @pytest.fixture(autouse=True)
    def bad_timeout(self, monkeypatch):
        monkeypatch.setenv("POTASSIUM_CONNECT_TIMEOUT_MS", "fast")

    def test_attach_returns_status(self, fake_network):
        fake_network.reachable = {8393}
        assert api.attach() == "Successfully attached on port 8393"

    def test_deliver_uses_default_timeout(self, monkeypatch):
        seen = []

        def fake_open(host, port, timeout_s):
            seen.append(timeout_s)
            from potassium.tools.delivery import ConnectFailure

            raise ConnectFailure(port, f"Cannot connect to port {port}: refused")

        monkeypatch.setattr("potassium.tools.delivery.open_connection", fake_open)

        status = api.deliver("print(1)", "8392")

        assert status == "Failed to connect on all ports: Cannot connect to port 8392: refused"
        assert seen == [0.4]

    def test_check_and_port_status(self, fake_network):
        fake_network.reachable = {8392}
        assert api.check("8392") is True
        assert api.port_status()[8392] is True
