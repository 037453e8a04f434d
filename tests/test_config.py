"""Settings parsing."""
from sitetrack.config import Settings


class TestSettings:

    def test_defaults(self) -> None:
        s = Settings(_env_file=None)
        assert s.api_prefix == "/api"
        assert s.database_url.startswith("postgresql+asyncpg://")
        assert s.google_maps_api_key is None

    def test_cors_origins_comma_separated(self) -> None:
        s = Settings(_env_file=None, cors_origins="http://a.test, http://b.test")
        assert s.cors_origins == ["http://a.test", "http://b.test"]

    def test_cors_origins_json(self) -> None:
        s = Settings(_env_file=None, cors_origins='["http://a.test"]')
        assert s.cors_origins == ["http://a.test"]

    def test_log_level_normalised(self) -> None:
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_env_override(self, monkeypatch) -> None:
        monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "from-env")
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./local.db")
        s = Settings(_env_file=None)
        assert s.google_maps_api_key == "from-env"
        assert s.database_url == "sqlite+aiosqlite:///./local.db"
