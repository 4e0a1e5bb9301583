"""Unit tests for application settings configuration."""

import logging
from pathlib import Path

from app.config import Settings
from app.infrastructure.logging.log_config import setup_logging


def test_settings_uses_backend_env_file_independent_of_cwd():
    """Settings should always include backend/.env as an env source."""
    env_files = Settings.model_config.get("env_file")
    assert env_files is not None

    normalized = {str(Path(item)) for item in env_files}
    expected_backend_env = str(Path(__file__).resolve().parents[2] / ".env")

    assert expected_backend_env in normalized
    assert str(Path(".env")) in normalized


def test_retrieval_defaults():
    settings = Settings(_env_file=None)

    assert settings.embedding_model == "google/gemini-embedding-001"
    assert settings.embedding_dimensions == 768
    assert settings.embedding_max_chars == 8000
    assert (settings.chunk_target_size, settings.chunk_overlap, settings.chunk_min_size) == (800, 100, 200)
    assert settings.chunk_write_batch_size == 50
    assert settings.chunk_in_query_limit == 30
    assert settings.similarity_floor == 0.5


def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("SIMILARITY_FLOOR", "0.55")
    monkeypatch.setenv("CHUNK_TARGET_SIZE", "1200")

    settings = Settings(_env_file=None)

    assert settings.similarity_floor == 0.55
    assert settings.chunk_target_size == 1200


def test_overlap_not_below_target_logs_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="app.config"):
        Settings(_env_file=None, chunk_target_size=100, chunk_overlap=100)

    assert "chunk_overlap" in caplog.text


def test_setup_logging_applies_category_levels():
    settings = Settings(_env_file=None, log_level_sql="ERROR", log_level_pipeline="DEBUG")

    setup_logging(settings)

    assert logging.getLogger("sqlalchemy.engine").level == logging.ERROR
    assert logging.getLogger("DocumentIndexingService").level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING


def test_setup_logging_unknown_level_falls_back_to_info():
    settings = Settings(_env_file=None, log_level_openrouter="LOUD")

    applied = setup_logging(settings)

    assert applied["app.infrastructure.openrouter"] == logging.INFO
    assert applied["aiosqlite"] == logging.WARNING
