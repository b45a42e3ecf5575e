"""Tests for settings, address sanitizing and contract address resolution."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from attendance_bridge.config import (
    DEFAULT_GAS_LIMIT,
    DEFAULT_RPC_URL,
    Settings,
    load_environment,
    read_deployment_address,
    resolve_contract_address,
    sanitize_address,
)
from attendance_bridge.errors import ConfigurationError

ADDR = "0x5FbDB2315678afecb367f032d93F642f64180aa3"


class TestSanitizeAddress:
    """Tests for sanitize_address."""

    def test_strips_key_prefix(self) -> None:
        assert sanitize_address(f"CONTRACT_ADDRESS={ADDR}") == ADDR

    def test_strips_double_quotes(self) -> None:
        assert sanitize_address(f'"{ADDR}"') == ADDR

    def test_strips_single_quotes_and_whitespace(self) -> None:
        assert sanitize_address(f"  '{ADDR}'\n") == ADDR

    def test_strips_prefix_and_quotes(self) -> None:
        assert sanitize_address(f'CONTRACT_ADDRESS="{ADDR}"') == ADDR

    def test_plain_value_unchanged(self) -> None:
        assert sanitize_address(ADDR) == ADDR

    def test_empty(self) -> None:
        assert sanitize_address(None) == ""
        assert sanitize_address("") == ""
        assert sanitize_address('""') == ""


class TestSettingsFromEnv:
    """Tests for Settings.from_env."""

    def test_defaults(self) -> None:
        settings = Settings.from_env({})
        assert settings.rpc_url == DEFAULT_RPC_URL
        assert settings.private_key is None
        assert settings.contract_address is None
        assert settings.gas_limit == DEFAULT_GAS_LIMIT
        assert settings.wait_for_receipt is False
        assert settings.include_stack is True
        assert settings.deployment_file == Path("deployment.json")

    def test_eth_rpc_url_preferred_over_rpc_url(self) -> None:
        settings = Settings.from_env({"ETH_RPC_URL": "http://a", "RPC_URL": "http://b"})
        assert settings.rpc_url == "http://a"
        assert Settings.from_env({"RPC_URL": "http://b"}).rpc_url == "http://b"

    def test_contract_address_is_sanitized(self) -> None:
        settings = Settings.from_env({"CONTRACT_ADDRESS": f'CONTRACT_ADDRESS="{ADDR}"'})
        assert settings.contract_address == ADDR

    def test_private_key_gets_prefix(self) -> None:
        settings = Settings.from_env({"PRIVATE_KEY": "ab" * 32})
        assert settings.private_key == "0x" + "ab" * 32

    def test_numeric_and_boolean_values(self) -> None:
        settings = Settings.from_env({
            "GAS_LIMIT": "500000",
            "CHAIN_ID": "31337",
            "RPC_TIMEOUT": "5",
            "WAIT_FOR_RECEIPT": "true",
            "INCLUDE_STACK": "0",
        })
        assert settings.gas_limit == 500_000
        assert settings.chain_id == 31337
        assert settings.timeout == 5.0
        assert settings.wait_for_receipt is True
        assert settings.include_stack is False

    def test_bad_gas_limit(self) -> None:
        with pytest.raises(ConfigurationError, match="GAS_LIMIT"):
            Settings.from_env({"GAS_LIMIT": "lots"})

    def test_bad_boolean(self) -> None:
        with pytest.raises(ConfigurationError, match="WAIT_FOR_RECEIPT"):
            Settings.from_env({"WAIT_FOR_RECEIPT": "maybe"})

    def test_non_positive_timeout(self) -> None:
        with pytest.raises(ConfigurationError, match="RPC_TIMEOUT"):
            Settings.from_env({"RPC_TIMEOUT": "0"})

    def test_overrides_skip_none(self) -> None:
        settings = Settings.from_env({"GAS_LIMIT": "500000"})
        updated = settings.with_overrides(gas_limit=None, rpc_url="http://node")
        assert updated.gas_limit == 500_000
        assert updated.rpc_url == "http://node"

    def test_unknown_override(self) -> None:
        with pytest.raises(TypeError):
            Settings().with_overrides(colour="blue")


class TestResolveContractAddress:
    """Tests for contract address precedence."""

    def test_environment_wins(self, tmp_path: Path) -> None:
        deployment = tmp_path / "deployment.json"
        deployment.write_text(json.dumps({"contractAddress": "0x" + "22" * 20}), encoding="utf-8")
        settings = Settings(
            contract_address=ADDR,
            configured_address="0x" + "33" * 20,
            deployment_file=deployment,
        )
        address, source = resolve_contract_address(settings)
        assert address == ADDR
        assert "environment" in source

    def test_static_configuration_before_file(self, tmp_path: Path) -> None:
        deployment = tmp_path / "deployment.json"
        deployment.write_text(json.dumps({"contractAddress": "0x" + "22" * 20}), encoding="utf-8")
        settings = Settings(configured_address="0x" + "33" * 20, deployment_file=deployment)
        address, source = resolve_contract_address(settings)
        assert address == "0x" + "33" * 20
        assert source == "static configuration"

    def test_deployment_file(self, tmp_path: Path) -> None:
        deployment = tmp_path / "deployment.json"
        deployment.write_text(json.dumps({"contractAddress": ADDR}), encoding="utf-8")
        address, source = resolve_contract_address(Settings(deployment_file=deployment))
        assert address == ADDR
        assert "deployment descriptor" in source

    def test_deployment_file_address_alias(self, tmp_path: Path) -> None:
        deployment = tmp_path / "deployment.json"
        deployment.write_text(json.dumps({"address": ADDR}), encoding="utf-8")
        assert read_deployment_address(deployment) == ADDR

    def test_unparseable_deployment_file(self, tmp_path: Path) -> None:
        deployment = tmp_path / "deployment.json"
        deployment.write_text("{not json", encoding="utf-8")
        assert read_deployment_address(deployment) is None

    def test_nothing_configured(self, tmp_path: Path) -> None:
        settings = Settings(deployment_file=tmp_path / "missing.json")
        with pytest.raises(ConfigurationError, match="Contract address not found"):
            resolve_contract_address(settings)


class TestLoadEnvironment:
    """Tests for .env loading."""

    def test_does_not_override_existing(self, tmp_path: Path, clean_env) -> None:
        clean_env(GAS_LIMIT="100000")
        env_file = tmp_path / ".env"
        env_file.write_text("GAS_LIMIT=200000\nCHAIN_ID=5\n", encoding="utf-8")

        load_environment(env_file)

        settings = Settings.from_env()
        assert settings.gas_limit == 100_000
        assert settings.chain_id == 5

    def test_missing_file_is_ignored(self, tmp_path: Path) -> None:
        load_environment(tmp_path / "nope.env")

    def test_undecodable_file(self, tmp_path: Path, clean_env) -> None:
        env_file = tmp_path / ".env"
        env_file.write_bytes(b"GAS_LIMIT=\xff\xfe\n")

        with pytest.raises(ConfigurationError, match="env file"):
            load_environment(env_file)
