"""
ThorClient - CLI Tests
========================
Tests for the typer CLI (node stubbed with FakeTransport).
"""

import pytest
from typer.testing import CliRunner

from thor_client.cli.main import app, state
from thor_client.constants import SOFTWARE_VERSION

from conftest import REFERENCE_ADDRESS, REFERENCE_PRIVATE_KEY, REFERENCE_RECEIVER, REFERENCE_TX_ID


runner = CliRunner()


@pytest.fixture
def cli_transport(transport, monkeypatch):
    """Inietta il FakeTransport nello stato globale della CLI"""
    monkeypatch.setattr(state, "transport", transport)
    monkeypatch.setattr(state, "config", None)
    monkeypatch.delenv("THORCLIENT_PRIVATE_KEY", raising=False)
    return transport


class TestCLI:
    """Test comandi CLI"""

    def test_version(self):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert SOFTWARE_VERSION in result.output

    def test_key_address_from_env(self, monkeypatch):
        monkeypatch.setenv("THORCLIENT_PRIVATE_KEY", REFERENCE_PRIVATE_KEY)

        result = runner.invoke(app, ["key", "address"])

        assert result.exit_code == 0
        assert REFERENCE_ADDRESS in result.output.lower()
        assert REFERENCE_PRIVATE_KEY not in result.output

    def test_key_address_prompt(self, monkeypatch):
        monkeypatch.delenv("THORCLIENT_PRIVATE_KEY", raising=False)

        result = runner.invoke(app, ["key", "address"], input=REFERENCE_PRIVATE_KEY + "\n")

        assert result.exit_code == 0
        assert REFERENCE_ADDRESS in result.output.lower()

    def test_key_address_invalid(self):
        result = runner.invoke(app, ["key", "address", "--private-key", "0x1234"])

        assert result.exit_code == 1
        assert "INVALID_PRIVATE_KEY" in result.output

    def test_chain_tag(self, cli_transport):
        result = runner.invoke(app, ["chain-tag"])

        assert result.exit_code == 0
        assert "0x27" in result.output

    def test_mpp_add_user(self, cli_transport):
        result = runner.invoke(app, [
            "mpp", "add-user",
            "--receiver", REFERENCE_ADDRESS,
            "--user", REFERENCE_RECEIVER,
            "--private-key", REFERENCE_PRIVATE_KEY,
        ])

        assert result.exit_code == 0
        assert len(cli_transport.requests("POST")) == 1

    def test_mpp_invalid_address(self, cli_transport):
        result = runner.invoke(app, [
            "mpp", "add-user",
            "--receiver", "0x1234",
            "--user", REFERENCE_RECEIVER,
            "--private-key", REFERENCE_PRIVATE_KEY,
        ])

        assert result.exit_code == 1
        assert cli_transport.calls == []

    def test_receipt_pending(self, cli_transport):
        cli_transport.responses[("GET", f"/transactions/{REFERENCE_TX_ID}/receipt")] = None

        result = runner.invoke(app, ["tx", "receipt", REFERENCE_TX_ID])

        assert result.exit_code == 2
        assert "not available" in result.output

    def test_key_commands_never_create_keys(self):
        result = runner.invoke(app, ["key", "generate"])

        assert result.exit_code != 0
        assert "0x" not in result.output
