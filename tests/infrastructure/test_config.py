import logging
from pathlib import Path

import pytest
import structlog

from storefront.config import FIVE_DAYS, Settings
from storefront.infrastructure.bootstrap import build_storefront
from storefront.infrastructure.logging import configure_logging


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)  # keep any developer .env out of the way
    for name in (
        "STOREFRONT_DATA_DIR",
        "STOREFRONT_SESSION_SECRET",
        "STOREFRONT_SESSION_TTL",
        "STOREFRONT_LOG_LEVEL",
        "STOREFRONT_ENV",
        "STOREFRONT_NOTIFY_TIMEOUT",
    ):
        # setenv first so teardown also undoes values load_dotenv() writes
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


class TestSettings:

    def test_defaults(self, clean_env):
        settings = Settings.from_env()
        assert settings.session_secret == ""
        assert settings.session_ttl_seconds == FIVE_DAYS
        assert settings.log_level == "INFO"
        assert settings.environment == "development"
        assert settings.notification_timeout_seconds == 5.0

    def test_reads_environment(self, clean_env, tmp_path):
        clean_env.setenv("STOREFRONT_DATA_DIR", str(tmp_path / "data"))
        clean_env.setenv("STOREFRONT_SESSION_SECRET", "s3cret")
        clean_env.setenv("STOREFRONT_SESSION_TTL", "120")
        clean_env.setenv("STOREFRONT_LOG_LEVEL", "debug")
        clean_env.setenv("STOREFRONT_ENV", "Production")
        clean_env.setenv("STOREFRONT_NOTIFY_TIMEOUT", "0.5")

        settings = Settings.from_env()

        assert settings.data_dir == tmp_path / "data"
        assert settings.session_secret == "s3cret"
        assert settings.session_ttl_seconds == 120
        assert settings.log_level == "DEBUG"
        assert settings.environment == "production"
        assert settings.notification_timeout_seconds == 0.5
        assert settings.session_file == tmp_path / "data" / "session"

    def test_dotenv_file_is_honoured(self, clean_env, tmp_path):
        (tmp_path / ".env").write_text("STOREFRONT_SESSION_SECRET=from-dotenv\n")
        assert Settings.from_env().session_secret == "from-dotenv"


class TestBuildStorefront:

    def test_refuses_to_start_without_secret(self, tmp_path):
        with pytest.raises(RuntimeError, match="STOREFRONT_SESSION_SECRET"):
            build_storefront(Settings(data_dir=tmp_path))

    async def test_wires_json_stores_in_data_dir(self, tmp_path):
        app = build_storefront(Settings(data_dir=tmp_path, session_secret="s3cret"))
        await app.start()
        try:
            assert app.bus.running
            assert app.bus.subscriber_count() == 1
        finally:
            await app.shutdown()

        assert {p.name for p in Path(tmp_path).iterdir()} == {
            "users.json",
            "products.json",
            "orders.json",
        }


class TestConfigureLogging:

    @pytest.fixture(autouse=True)
    def restore_logging(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers = handlers
        root.setLevel(level)
        structlog.reset_defaults()

    def test_sets_level_and_single_handler(self, tmp_path):
        configure_logging(Settings(data_dir=tmp_path, log_level="WARNING"))
        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1

    def test_production_renders_json(self, tmp_path):
        configure_logging(Settings(data_dir=tmp_path, environment="production"))
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
