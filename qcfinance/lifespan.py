from __future__ import annotations

import inspect
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncContextManager

from fastapi import FastAPI

from qcfinance.config import Settings, get_settings
from qcfinance.core.parameters import TaxParameters
from qcfinance.core.simulator import LifeSimulator
from qcfinance.printout.report_render import PdfReportRenderer
from qcfinance.reference.cities import CityCatalog, catalog_from_path, default_catalog
from qcfinance.storage.scenarios import JsonScenarioStore, ScenarioStore
from qcfinance.tax_years import load_parameters, parameters_from_path

Hook = Callable[[FastAPI], Awaitable[None] | None]

_STATE_ATTRS = (
    "settings",
    "parameters",
    "catalog",
    "simulator",
    "scenario_store",
    "report_renderer",
    "telemetry_handler",
    "app_label",
)


def _open_telemetry_sink(
    logger: logging.Logger, app_label: str, log_dir: str
) -> logging.Handler | None:
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


def _load_reference_data(settings: Settings) -> tuple[TaxParameters, CityCatalog]:
    if settings.parameters_path:
        parameters = parameters_from_path(settings.parameters_path)
    else:
        parameters = load_parameters(settings.tax_year)
    catalog = catalog_from_path(settings.cities_path) if settings.cities_path else default_catalog()
    return parameters, catalog


async def _invoke_hook(hook: Hook | None, app: FastAPI) -> None:
    if hook is None:
        return
    try:
        result = hook(app)
        if inspect.isawaitable(result):
            await result  # type: ignore[func-returns-value]
    except Exception:  # pragma: no cover - hooks are user provided
        logging.getLogger("qcfinance").exception("Application lifecycle hook failed")


def build_application_lifespan(
    app_label: str,
    *,
    startup_hook: Hook | None = None,
    shutdown_hook: Hook | None = None,
    scenario_store: ScenarioStore | None = None,
) -> Callable[[FastAPI], AsyncContextManager[None]]:
    base_logger = logging.getLogger("qcfinance")

    @asynccontextmanager
    async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
        settings = get_settings()
        logger = base_logger.getChild(app_label)
        parameters, catalog = _load_reference_data(settings)
        store = scenario_store or JsonScenarioStore(
            settings.scenario_root, max_scenarios=settings.max_saved_scenarios
        )
        # The sink sits on the package logger so every qcfinance.* record reaches it.
        telemetry_handler = _open_telemetry_sink(base_logger, app_label, settings.log_dir)
        previous_level = base_logger.level
        if telemetry_handler is not None and previous_level == logging.NOTSET:
            base_logger.setLevel(logging.INFO)

        app.state.settings = settings
        app.state.parameters = parameters
        app.state.catalog = catalog
        app.state.simulator = LifeSimulator(parameters, catalog)
        app.state.scenario_store = store
        app.state.report_renderer = PdfReportRenderer()
        app.state.telemetry_handler = telemetry_handler
        app.state.app_label = app_label

        logger.info(
            "Startup complete: tax_year=%s cities=%s", parameters.tax_year, len(catalog.cities)
        )

        try:
            await _invoke_hook(startup_hook, app)
            yield
        finally:
            await _invoke_hook(shutdown_hook, app)
            logger.info("Shutdown complete")
            if telemetry_handler is not None:
                base_logger.removeHandler(telemetry_handler)
                telemetry_handler.close()
                base_logger.setLevel(previous_level)
            for attr in _STATE_ATTRS:
                if hasattr(app.state, attr):
                    delattr(app.state, attr)

    return _lifespan


__all__ = ["build_application_lifespan"]
