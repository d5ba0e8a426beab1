"""Tests for pool and server configuration."""

import pytest

from dex.config import DEFAULT_POOL_CONFIG, LiquidityPolicy, PoolConfig, ServerConfig
from dex.logging_setup import configure_logging


class TestPoolConfig:
    def test_defaults(self):
        assert DEFAULT_POOL_CONFIG.liquidity_policy is LiquidityPolicy.PROPORTIONAL_MIN
        assert DEFAULT_POOL_CONFIG.check_invariants is True

    def test_frozen(self):
        config = PoolConfig()
        with pytest.raises(AttributeError):
            config.liquidity_policy = LiquidityPolicy.STRICT_RATIO  # type: ignore[misc]


class TestServerConfigFromEnv:
    def test_defaults_from_empty_environment(self):
        config = ServerConfig.from_env({})
        assert config.host == "0.0.0.0"
        assert config.port == 8000
        assert config.debug is False
        assert config.log_level == "INFO"
        assert config.pool == DEFAULT_POOL_CONFIG

    def test_reads_all_variables(self):
        config = ServerConfig.from_env(
            {
                "DEX_HOST": "127.0.0.1",
                "DEX_PORT": "9001",
                "DEX_DEBUG": "Yes",
                "DEX_LOG_LEVEL": "debug",
                "DEX_LIQUIDITY_POLICY": "STRICT_RATIO",
            }
        )
        assert config.host == "127.0.0.1"
        assert config.port == 9001
        assert config.debug is True
        assert config.log_level == "DEBUG"
        assert config.pool.liquidity_policy is LiquidityPolicy.STRICT_RATIO

    def test_unknown_policy_raises(self):
        with pytest.raises(ValueError):
            ServerConfig.from_env({"DEX_LIQUIDITY_POLICY": "blended"})

    def test_bad_port_raises(self):
        with pytest.raises(ValueError):
            ServerConfig.from_env({"DEX_PORT": "eighty"})

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("DEX_PORT", "8123")
        assert ServerConfig.from_env().port == 8123


class TestConfigureLogging:
    def test_unknown_level_raises(self):
        with pytest.raises(ValueError):
            configure_logging("CHATTY")
