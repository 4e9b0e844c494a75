"""MLflow spans for the YouTube tools (optional).

Each MCP tool is wrapped in a ``TOOL`` span tagged with the package name,
so cache hits and upstream calls for one request can be told apart in the
MLflow UI. Install the ``tracing`` extra and set ``MLFLOW_TRACKING_URI`` to
turn it on; without either, ``trace()`` hands the function back unchanged.

Env vars (all optional):
    MLFLOW_TRACKING_URI: Where to store traces. Empty = tracing disabled.
    MLFLOW_EXPERIMENT_NAME: Experiment name (default ``youtube-tools-mcp``).
    YT_TOOLS_TRACING_ENABLED: ``"false"`` disables tracing even with a URI.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

SPAN_ATTRIBUTES: dict[str, str] = {"component": "youtube-tools-mcp"}

try:
    import mlflow

    _HAS_MLFLOW = True
except ImportError:
    _HAS_MLFLOW = False

_warned_missing = False


def is_enabled() -> bool:
    """True when tracing is configured and ``mlflow-tracing`` is importable.

    A configured tracking URI without the package logs one warning.
    """
    global _warned_missing
    from .config import get_config

    if not get_config().tracing_enabled:
        return False
    if not _HAS_MLFLOW:
        if not _warned_missing:
            logger.warning(
                "MLFLOW_TRACKING_URI is set but mlflow-tracing is not installed; "
                "install youtube-tools-mcp[tracing] to record spans"
            )
            _warned_missing = True
        return False
    return True


def trace(
    func: Callable | None = None,
    *,
    name: str | None = None,
    span_type: str | None = None,
    attributes: dict[str, Any] | None = None,
) -> Callable:
    """Wrap a tool in an MLflow span, or return it untouched when tracing is off.

    *attributes* are merged over ``SPAN_ATTRIBUTES``.

    Usage::

        @trace(name="youtube_transcript", span_type="TOOL")
        async def youtube_transcript(...): ...
    """
    if not is_enabled():
        return func if func is not None else (lambda f: f)
    return mlflow.trace(
        func,
        name=name,
        span_type=span_type,
        attributes={**SPAN_ATTRIBUTES, **(attributes or {})},
    )


def setup() -> None:
    """Select the tracking server and experiment at server start.

    Failures are logged; the server starts without tracing.
    """
    if not is_enabled():
        return

    from .config import get_config

    cfg = get_config()
    try:
        mlflow.set_tracking_uri(cfg.mlflow_tracking_uri)
        mlflow.set_experiment(cfg.mlflow_experiment_name)
    except Exception:
        logger.warning("MLflow tracing setup failed, continuing without tracing", exc_info=True)
        return
    logger.info(
        "Tracing YouTube tools to %s (experiment %s)",
        cfg.mlflow_tracking_uri,
        cfg.mlflow_experiment_name,
    )


def shutdown() -> None:
    """Flush spans still queued for async export."""
    if not is_enabled():
        return

    try:
        mlflow.flush_trace_async_logging()
    except Exception:
        logger.warning("MLflow trace flush failed", exc_info=True)
