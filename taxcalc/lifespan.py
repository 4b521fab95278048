from __future__ import annotations

import inspect
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncContextManager

from fastapi import FastAPI

from taxcalc.config import get_settings
from taxcalc.core.regimes import build_regime_table

Hook = Callable[[FastAPI], Awaitable[None] | None]

_STATE_ATTRS = ("settings", "regime_table", "table_digest", "log_handler", "app_label")


def _open_log_sink(logger: logging.Logger, log_dir: str | None, app_label: str) -> logging.Handler | None:
    if not log_dir:
        return None
    logs_dir = Path(log_dir)
    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.warning("Unable to create logs directory %s: %s", logs_dir, exc)
        return None
    handler = logging.FileHandler(logs_dir / f"{app_label}.log", encoding="utf-8")
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s"))
    logger.addHandler(handler)
    return handler


async def _invoke_hook(hook: Hook | None, app: FastAPI) -> None:
    if hook is None:
        return
    result = hook(app)
    if inspect.isawaitable(result):
        await result


def build_application_lifespan(
    app_label: str,
    *,
    startup_hook: Hook | None = None,
    shutdown_hook: Hook | None = None,
) -> Callable[[FastAPI], AsyncContextManager[None]]:
    base_logger = logging.getLogger("taxcalc")

    @asynccontextmanager
    async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
        settings = get_settings()
        logger = base_logger.getChild(app_label)
        base_logger.setLevel(settings.numeric_log_level())
        # A broken regime table is a deployment defect: fail startup, not requests.
        table = build_regime_table(settings)
        log_handler = _open_log_sink(base_logger, settings.log_dir, app_label)

        app.state.settings = settings
        app.state.regime_table = table
        app.state.table_digest = table.digest()
        app.state.log_handler = log_handler
        app.state.app_label = app_label

        logger.info(
            "Startup complete: configs=%s default=%s/%s digest=%s",
            len(table),
            *table.default_key,
            app.state.table_digest,
        )

        try:
            await _invoke_hook(startup_hook, app)
            yield
        finally:
            await _invoke_hook(shutdown_hook, app)
            if log_handler is not None:
                base_logger.removeHandler(log_handler)
                log_handler.close()
            for attr in _STATE_ATTRS:
                if hasattr(app.state, attr):
                    delattr(app.state, attr)
            logger.info("Shutdown complete")

    return _lifespan
