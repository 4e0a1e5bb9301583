"""Colored pipeline logger for the document indexing pipeline.

Follows one resource through chunk → embed → store, and a query through
search, with one color and icon per stage:

    🟡 CHUNK   ✂️   text split into fragments
    🟣 EMBED   🧮  vectors requested from the embedding provider
    🟢 STORE   💾  fragments written to the chunk store
    🔵 SEARCH  🔍  similarity ranking
    🔴 ERROR   ❌  a failed step

Colors are dropped when ``colored=False`` (e.g. when logs go to a file).
"""

import logging
import time
from contextlib import contextmanager
from typing import Any, NamedTuple


class _Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    GRAY = "\033[90m"


class Stage(NamedTuple):
    label: str
    color: str
    icon: str


class PipelineStage:
    """Stages of the indexing and retrieval pipeline."""

    CHUNK = Stage("CHUNK", _Colors.YELLOW, "✂️")
    EMBED = Stage("EMBED", _Colors.MAGENTA, "🧮")
    STORE = Stage("STORE", _Colors.GREEN, "💾")
    SEARCH = Stage("SEARCH", _Colors.BLUE, "🔍")
    ERROR = Stage("ERROR", _Colors.RED, "❌")


def _format_details(kwargs: dict[str, Any], sep: str = "=") -> str:
    return " | ".join(f"{k}{sep}{v}" for k, v in kwargs.items())


class PipelineLogger:
    """Color-coded logger for the indexing pipeline.

    Usage:
        log = PipelineLogger("DocumentIndexingService")
        log.separator("Preaching and Preachers")
        with log.timed_step(PipelineStage.EMBED, "Embedding 61 chunks"):
            vectors = await provider.embed_batch(texts)
        log.stats(resource="res-1", chunks=61, duration_ms=5400)
    """

    def __init__(self, component_name: str, *, colored: bool = True):
        self._logger = logging.getLogger(component_name)
        self._colored = colored

    def _paint(self, text: str, *codes: str) -> str:
        if not self._colored or not codes:
            return text
        return f"{''.join(codes)}{text}{_Colors.RESET}"

    def _with_details(self, formatted: str, kwargs: dict[str, Any]) -> str:
        if not kwargs:
            return formatted
        return f"{formatted} {self._paint(f'({_format_details(kwargs)})', _Colors.GRAY)}"

    def step_start(self, stage: Stage, message: str, **kwargs: Any) -> None:
        formatted = (
            f"{self._paint(f'{stage.icon} [{stage.label}]', stage.color, _Colors.BOLD)} "
            f"{self._paint(message, stage.color)}"
        )
        self._logger.info(self._with_details(formatted, kwargs))

    def step_complete(self, stage: Stage, message: str, **kwargs: Any) -> None:
        formatted = (
            f"{self._paint(f'{stage.icon} [{stage.label}]', stage.color)} "
            f"{self._paint(f'✓ {message}', _Colors.GREEN)}"
        )
        self._logger.info(self._with_details(formatted, kwargs))

    def step_error(self, stage: Stage, message: str, error: Exception | None = None) -> None:
        formatted = (
            f"{self._paint(f'❌ [{stage.label}]', _Colors.RED, _Colors.BOLD)} "
            f"{self._paint(message, _Colors.RED)}"
        )
        if error is not None:
            formatted += f" {self._paint(f'→ {type(error).__name__}: {error}', _Colors.DIM)}"
        self._logger.error(formatted)

    def detail(self, message: str, **kwargs: Any) -> None:
        """Indented gray line under the current step."""
        self._logger.info(self._with_details(self._paint(f"   ├─ {message}", _Colors.GRAY), kwargs))

    def separator(self, title: str = "") -> None:
        line = f"{'─' * 10} {title} {'─' * max(50 - len(title), 0)}" if title else "─" * 60
        self._logger.info(self._paint(line, _Colors.GRAY))

    def stats(self, **kwargs: Any) -> None:
        self._logger.info(self._paint(f"   📈 {_format_details(kwargs, ': ')}", _Colors.GRAY))

    @contextmanager
    def timed_step(self, stage: Stage, message: str, **kwargs: Any):
        """Log start and end of a step with its elapsed time; failures are logged and re-raised."""
        self.step_start(stage, message, **kwargs)
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            self.step_error(stage, f"{message} failed after {time.perf_counter() - start:.2f}s", error=e)
            raise
        self.step_complete(stage, f"{message} ({time.perf_counter() - start:.2f}s)", **kwargs)
