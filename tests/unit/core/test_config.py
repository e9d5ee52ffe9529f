"""
Unit tests for the configuration module.

Tests Settings validation and environment handling.
"""

import os

import pytest
from pydantic import ValidationError

SECRET = "test-secret-key-for-testing-purposes-only-32chars"


def make_settings(**overrides):
    from app.core.config import Settings

    values = {"JWT_SECRET_KEY": SECRET}
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestSettingsValidation:
    """Tests for Settings class validation."""

    @pytest.mark.unit
    def test_jwt_secret_key_minimum_length(self):
        """Test that JWT_SECRET_KEY must be at least 32 characters."""
        assert len(make_settings(JWT_SECRET_KEY="a" * 32).JWT_SECRET_KEY) == 32

    @pytest.mark.unit
    def test_jwt_secret_key_too_short(self):
        with pytest.raises(ValidationError):
            make_settings(JWT_SECRET_KEY="short")

    @pytest.mark.unit
    @pytest.mark.parametrize("value,expected", [("open", "open"), (" ADMIN_VALIDATION ", "admin_validation")])
    def test_registration_strategy_normalized(self, value, expected):
        assert make_settings(ACCOUNT_REGISTRATION_STRATEGY=value).ACCOUNT_REGISTRATION_STRATEGY == expected

    @pytest.mark.unit
    def test_registration_strategy_rejects_unknown(self):
        with pytest.raises(ValidationError):
            make_settings(ACCOUNT_REGISTRATION_STRATEGY="invite_only")

    @pytest.mark.unit
    def test_accounts_enabled_on_creation(self):
        assert make_settings(ACCOUNT_REGISTRATION_STRATEGY="open").accounts_enabled_on_creation is True
        assert make_settings(
            ACCOUNT_REGISTRATION_STRATEGY="admin_validation"
        ).accounts_enabled_on_creation is False


class TestEnvironmentDetection:
    """Tests for environment detection properties."""

    @pytest.mark.unit
    @pytest.mark.parametrize("environment", ["development", "dev", "local"])
    def test_is_development(self, environment):
        settings = make_settings(ENVIRONMENT=environment)

        assert settings.is_development is True
        assert settings.is_production is False

    @pytest.mark.unit
    def test_is_production(self):
        settings = make_settings(ENVIRONMENT="production")

        assert settings.is_production is True
        assert settings.is_development is False


class TestCORSConfiguration:
    """Tests for CORS origin configuration."""

    @pytest.mark.unit
    def test_cors_origins_development_includes_localhost(self):
        origins = make_settings(ENVIRONMENT="development").resolved_cors_origins

        assert "http://localhost:8080" in origins

    @pytest.mark.unit
    def test_cors_origins_production_excludes_localhost(self):
        origins = make_settings(ENVIRONMENT="production").resolved_cors_origins

        assert "http://localhost:8080" not in origins

    @pytest.mark.unit
    def test_cors_origins_additional_comma_separated(self):
        origins = make_settings(
            ADDITIONAL_CORS_ORIGINS="https://plm.example.com,https://another.com"
        ).resolved_cors_origins

        assert "https://plm.example.com" in origins
        assert "https://another.com" in origins

    @pytest.mark.unit
    def test_cors_origins_json_array_format(self):
        origins = make_settings(
            ADDITIONAL_CORS_ORIGINS='["https://json-origin.com", "http://localhost:8080"]'
        ).resolved_cors_origins

        assert "https://json-origin.com" in origins
        assert origins.count("http://localhost:8080") == 1

    @pytest.mark.unit
    def test_jwt_header_is_exposed(self):
        assert "jwt" in make_settings().CORS_EXPOSE_HEADERS


class TestElasticsearchProperties:
    """Tests for the indexer properties bag."""

    @pytest.mark.unit
    def test_defaults(self):
        properties = make_settings().elasticsearch_properties

        assert properties == {
            "number_of_shards": "1",
            "number_of_replicas": "1",
            "auto_expand_replicas": "0-1",
            "serverUri": "http://localhost:9200",
        }

    @pytest.mark.unit
    def test_aws_keys_use_historical_names(self):
        properties = make_settings(
            ELASTICSEARCH_AWS_SERVICE="es",
            ELASTICSEARCH_AWS_REGION="us-east-1",
            ELASTICSEARCH_AWS_ACCESS_KEY="key",
            ELASTICSEARCH_AWS_SECRET_KEY="secret",
        ).elasticsearch_properties

        assert properties["awsService"] == "es"
        assert properties["awsRegion"] == "us-east-1"
        assert properties["awsAccessKey"] == "key"
        assert properties["awsSecretKey"] == "secret"


class TestAPIConfiguration:
    """Tests for API configuration."""

    @pytest.mark.unit
    def test_api_version_prefix(self):
        assert make_settings().API_V1_STR == "/api/v1"

    @pytest.mark.unit
    def test_session_cookie_name(self):
        assert make_settings().SESSION_COOKIE_NAME == "PLMSESSIONID"

    @pytest.mark.unit
    def test_environment_variable_is_read(self, monkeypatch):
        monkeypatch.setenv("JWT_EXPIRE_MINUTES", "15")

        assert make_settings().JWT_EXPIRE_MINUTES == 15
