"""Tests for configuration classes."""

import os
from decimal import Decimal
from unittest.mock import patch

from config import (
    AppConfig,
    CORSConfig,
    RateLimitConfig,
    SecurityConfig,
    TrainerConfig,
    _parse_cors_origins,
)
from core.strategy import RuleSet


class TestCORSConfig:
    """Tests for CORSConfig class."""

    def test_cors_default_origins(self):
        with patch.dict(os.environ, {}, clear=True):
            assert CORSConfig().allowed_origins == ["http://localhost:8000"]

    def test_cors_parses_env_var_with_whitespace(self):
        env_origins = "  http://example.com  , http://localhost:3000,,"
        with patch.dict(os.environ, {"CORS_ORIGINS": env_origins}):
            assert _parse_cors_origins() == ["http://example.com", "http://localhost:3000"]

    def test_cors_defaults_allow_all(self):
        config = CORSConfig()
        assert config.allow_credentials is True
        assert config.allow_methods == ["*"]
        assert config.allow_headers == ["*"]


class TestRateLimitConfig:
    """Tests for RateLimitConfig class."""

    def test_rate_limit_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = RateLimitConfig()
            assert config.enabled is True
            assert config.requests_per_minute == 60

    def test_rate_limit_from_env(self):
        with patch.dict(os.environ, {"RATE_LIMIT_ENABLED": "FALSE", "RATE_LIMIT_RPM": "120"}):
            config = RateLimitConfig()
            assert config.enabled is False
            assert config.requests_per_minute == 120


class TestSecurityConfig:
    """Tests for SecurityConfig class."""

    def test_secret_key_auto_generates(self):
        with patch.dict(os.environ, {}, clear=True):
            assert len(SecurityConfig().secret_key) > 0

    def test_secret_key_from_env(self):
        with patch.dict(os.environ, {"SECRET_KEY": "my-super-secret-key"}):
            assert SecurityConfig().secret_key == "my-super-secret-key"


class TestTrainerConfig:
    """Tests for TrainerConfig class."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = TrainerConfig()
            assert config.rules == RuleSet()
            assert config.starting_bankroll == Decimal("1000")

    def test_bankroll_from_env(self):
        with patch.dict(os.environ, {"STARTING_BANKROLL": "250.50"}):
            assert TrainerConfig().starting_bankroll == Decimal("250.50")


class TestAppConfig:
    """Tests for AppConfig class."""

    def test_app_config_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = AppConfig()
            assert config.debug is False
            assert config.host == "0.0.0.0"
            assert config.port == 8000
            assert config.session_ttl == 3600
            assert config.log_level == "INFO"

    def test_app_config_from_env(self):
        env = {"DEBUG": "true", "PORT": "9000", "LOG_LEVEL": "debug", "SESSION_TTL": "60"}
        with patch.dict(os.environ, env):
            config = AppConfig()
            assert config.debug is True
            assert config.port == 9000
            assert config.log_level == "DEBUG"
            assert config.session_ttl == 60

    def test_app_config_has_nested_configs(self):
        config = AppConfig()
        assert isinstance(config.trainer, TrainerConfig)
        assert isinstance(config.cors, CORSConfig)
        assert isinstance(config.rate_limit, RateLimitConfig)
        assert isinstance(config.security, SecurityConfig)
