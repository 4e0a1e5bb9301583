"""Per-category logging levels for the retrieval service.

Indexing a long book issues hundreds of embedding requests and chunk
writes; the SQL and HTTP loggers are therefore tuned separately from the
indexing pipeline and the OpenRouter adapter, all from Settings.

Usage:
    from app.infrastructure.logging.log_config import setup_logging
    setup_logging()   # once, from the FastAPI lifespan
"""

import logging
import sys

from app.config import Settings, get_settings

_LOG_FORMAT = "%(levelname)-8s %(name)s — %(message)s"

# Settings field → logger names it controls.
_CATEGORY_MAP: dict[str, tuple[str, ...]] = {
    "log_level_sql": ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite"),
    "log_level_http": ("httpx", "httpcore"),
    "log_level_uvicorn": ("uvicorn", "uvicorn.access", "uvicorn.error"),
    "log_level_pipeline": ("DocumentIndexingService", "app.application.services"),
    "log_level_openrouter": ("app.infrastructure.openrouter",),
}


def setup_logging(settings: Settings | None = None) -> dict[str, int]:
    """Apply the root level and every category level from settings.

    Tests may pass their own ``settings`` instead of the cached,
    environment-backed instance.

    Returns:
        The numeric level applied to each configured logger name.
    """
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(_parse_level(settings.log_level))
    # uvicorn installs its own handler; plain scripts and tests do not.
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        root.addHandler(handler)

    applied: dict[str, int] = {}
    for field_name, logger_names in _CATEGORY_MAP.items():
        level = _parse_level(getattr(settings, field_name, "INFO"))
        for name in logger_names:
            logging.getLogger(name).setLevel(level)
            applied[name] = level

    logging.getLogger(__name__).debug(
        "Logging configured: root=%s %s",
        settings.log_level,
        " ".join(f"{f.removeprefix('log_level_')}={getattr(settings, f)}" for f in _CATEGORY_MAP),
    )
    return applied


def _parse_level(raw: str) -> int:
    """Level name to logging constant; unknown names fall back to INFO."""
    numeric = logging.getLevelName(raw.strip().upper())
    return numeric if isinstance(numeric, int) else logging.INFO
