"""Tests for environment settings."""

from pathlib import Path

from stockroom.config import DEFAULT_API_URL, VERSION, load_settings


class TestLoadSettings:
    """Test load_settings."""

    def test_defaults(self):
        settings = load_settings({})

        assert settings.db_path == Path("data/stockroom.db")
        assert settings.uploads_dir == Path("uploads")
        assert settings.api_url == DEFAULT_API_URL
        assert settings.namespace == "shutterstock"
        assert settings.application == f"Stockroom/{VERSION}"
        assert settings.option_name == "shutterstock_option_name"

    def test_overrides(self):
        settings = load_settings(
            {
                "STOCKROOM_API_URL": "https://api.example.test/v2/",
                "STOCKROOM_NAMESPACE": "/stock/",
                "STOCKROOM_UPLOADS_URL": "https://cdn.example.test/media/",
                "STOCKROOM_PLATFORM": "Wordpress",
                "STOCKROOM_VERSION": "1.3.0",
            }
        )

        assert settings.api_url == "https://api.example.test/v2"
        assert settings.namespace == "stock"
        assert settings.uploads_url == "https://cdn.example.test/media"
        assert settings.application == "Wordpress/1.3.0"
        assert settings.option_name == "stock_option_name"
