"""Tests for settings and per-client configuration."""

import pytest
from pydantic import ValidationError

from futar.config import DEFAULT_VERSION, ClientConfig, Settings


class TestClientConfig:
    def test_defaults(self) -> None:
        config = ClientConfig()

        assert config.api_key == ""
        assert config.api_version == DEFAULT_VERSION == 3
        assert config.include_references is True

    def test_service_style_keys(self) -> None:
        config = ClientConfig.coerce(
            {"apiKey": "abc", "apiVersion": 2, "includeReferences": False}
        )

        assert config.api_key == "abc"
        assert config.api_version == 2
        assert config.include_references is False

    def test_snake_case_keys(self) -> None:
        config = ClientConfig.coerce({"api_version": 4, "include_references": False})

        assert config.api_version == 4
        assert config.include_references is False

    def test_falsy_values_fall_back(self) -> None:
        config = ClientConfig.coerce({"apiKey": None, "apiVersion": 0, "includeReferences": None})

        assert config.api_key == ""
        assert config.api_version == 3
        assert config.include_references is True

    def test_existing_instance_reused(self) -> None:
        config = ClientConfig(api_version=2)

        assert ClientConfig.coerce(config) is config

    def test_frozen(self) -> None:
        config = ClientConfig()

        with pytest.raises(ValidationError):
            config.api_version = 5

    def test_from_settings(self) -> None:
        settings = Settings(api_key="k", api_version=2, include_references=False)

        config = ClientConfig.from_settings(settings)

        assert (config.api_key, config.api_version, config.include_references) == ("k", 2, False)


class TestSettings:
    def test_environment_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("FUTAR_API_VERSION", "2")
        monkeypatch.setenv("FUTAR_LOG_LEVEL", "debug")

        settings = Settings()

        assert settings.api_version == 2
        assert settings.log_level == "DEBUG"

    def test_base_url_trailing_slash_stripped(self) -> None:
        assert Settings(base_url="https://futar.bkk.hu/api/").base_url == "https://futar.bkk.hu/api"

    @pytest.mark.parametrize(
        "field,value",
        [("base_url", "futar.bkk.hu"), ("log_level", "LOUD"), ("log_format", "xml")],
    )
    def test_invalid_values_rejected(self, field, value) -> None:
        with pytest.raises(ValidationError):
            Settings(**{field: value})
