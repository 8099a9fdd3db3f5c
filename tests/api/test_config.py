"""Tests for configuration classes."""

import os
from dataclasses import FrozenInstanceError
from unittest.mock import patch

import pytest

from config import (
    AppConfig,
    CORSConfig,
    GameConfig,
    LoggingConfig,
    RateLimitConfig,
    RedisConfig,
    SecurityConfig,
    _parse_cors_origins,
)
from core.game import DealerPolicy


class TestCORSConfig:
    """Tests for CORSConfig class."""

    def test_cors_default_origins(self):
        with patch.dict(os.environ, {}, clear=True):
            assert CORSConfig().allowed_origins == ["http://localhost:8000"]

    def test_cors_parses_env_var_with_whitespace(self):
        """Test origins are split on commas and stripped."""
        env_origins = "  http://example.com  ,http://localhost:3000, "
        with patch.dict(os.environ, {"CORS_ORIGINS": env_origins}):
            assert _parse_cors_origins() == ["http://example.com", "http://localhost:3000"]


class TestRateLimitConfig:
    """Tests for RateLimitConfig class."""

    def test_rate_limit_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = RateLimitConfig()
            assert config.enabled is True
            assert config.requests_per_minute == 60

    def test_rate_limit_from_env(self):
        with patch.dict(os.environ, {"RATE_LIMIT_ENABLED": "FALSE", "RATE_LIMIT_RPM": "5"}):
            config = RateLimitConfig()
            assert config.enabled is False
            assert config.requests_per_minute == 5


class TestSecurityConfig:
    """Tests for SecurityConfig class."""

    def test_secret_key_from_env(self):
        with patch.dict(os.environ, {"SECRET_KEY": "table-secret"}):
            assert SecurityConfig().secret_key == "table-secret"

    def test_secret_key_is_random_when_generated(self):
        with patch.dict(os.environ, {}, clear=True):
            assert SecurityConfig().secret_key != SecurityConfig().secret_key


class TestRedisConfig:
    """Tests for RedisConfig class."""

    def test_redis_url_without_password(self):
        with patch.dict(os.environ, {}, clear=True):
            assert RedisConfig().url == "redis://localhost:6379/0"

    def test_redis_url_with_password(self):
        env = {"REDIS_HOST": "cache", "REDIS_PORT": "6380", "REDIS_DB": "2", "REDIS_PASSWORD": "pw"}
        with patch.dict(os.environ, env, clear=True):
            assert RedisConfig().url == "redis://:pw@cache:6380/2"


class TestGameConfig:
    """Tests for GameConfig class."""

    def test_dealer_policy_default(self):
        with patch.dict(os.environ, {}, clear=True):
            assert GameConfig().dealer_policy == DealerPolicy.SINGLE_DRAW

    def test_dealer_policy_from_env(self):
        with patch.dict(os.environ, {"DEALER_POLICY": " Draw_To_17 "}):
            assert GameConfig().dealer_policy == DealerPolicy.DRAW_TO_17

    def test_unknown_dealer_policy_rejected(self):
        """Test a bad DEALER_POLICY fails when the config is built, not per request."""
        with patch.dict(os.environ, {"DEALER_POLICY": "hit_soft_17"}):
            with pytest.raises(ValueError, match="DEALER_POLICY"):
                GameConfig()
            with pytest.raises(ValueError, match="hit_soft_17"):
                AppConfig()

    def test_game_config_frozen(self):
        with pytest.raises(FrozenInstanceError):
            GameConfig().dealer_policy = DealerPolicy.DRAW_TO_17


class TestLoggingConfig:
    """Tests for LoggingConfig class."""

    def test_level_default(self):
        with patch.dict(os.environ, {}, clear=True):
            assert LoggingConfig().level == "INFO"

    def test_level_uppercased(self):
        with patch.dict(os.environ, {"LOG_LEVEL": "debug"}):
            assert LoggingConfig().level == "DEBUG"


class TestAppConfig:
    """Tests for AppConfig class."""

    def test_app_config_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = AppConfig()
            assert config.debug is False
            assert config.port == 8000
            assert config.session_ttl == 3600

    def test_app_config_has_nested_configs(self):
        config = AppConfig()
        assert isinstance(config.redis, RedisConfig)
        assert isinstance(config.game, GameConfig)
        assert isinstance(config.cors, CORSConfig)
        assert isinstance(config.rate_limit, RateLimitConfig)
        assert isinstance(config.security, SecurityConfig)
        assert isinstance(config.logging, LoggingConfig)


class TestEntryPoint:
    """Tests for serving the app with the configured host and port."""

    def test_main_runs_uvicorn_with_config(self):
        from api import main as main_module

        with patch.object(main_module.uvicorn, "run") as run:
            main_module.main()

        run.assert_called_once_with(
            main_module.app,
            host=main_module.config.host,
            port=main_module.config.port,
            log_level=main_module.config.logging.level.lower(),
        )

    def test_host_and_port_from_env(self):
        with patch.dict(os.environ, {"HOST": "127.0.0.1", "PORT": "9001"}):
            config = AppConfig()
            assert config.host == "127.0.0.1"
            assert config.port == 9001
