"""Bundled yearly parameter sets.

Every figure the engine needs for one tax year (brackets, basic personal
amounts, payroll programs, benefit phase-outs, child costs and household
factors) lives in ``data/tax_<year>.json``. Adding a year means dropping a
new file next to the existing ones; nothing in ``qcfinance.core`` changes.
"""
from __future__ import annotations

import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Mapping

from pydantic import ValidationError

from qcfinance.core.parameters import TaxParameters

_DATA_PATTERN = re.compile(r"^tax_(\d{4})\.json$")

logger = logging.getLogger("qcfinance").getChild("tax_years")


class ParameterLoadError(ValueError):
    pass


def _data_path() -> Path:
    return Path(__file__).resolve().parent / "data"


def _discover() -> Mapping[int, Path]:
    mapping: dict[int, Path] = {}
    for path in _data_path().glob("tax_*.json"):
        match = _DATA_PATTERN.match(path.name)
        if not match:
            continue
        mapping[int(match.group(1))] = path
    return mapping


SUPPORTED_YEARS: tuple[int, ...] = tuple(sorted(_discover().keys()))


def parameters_from_path(path: str | Path) -> TaxParameters:
    source = Path(path)
    try:
        payload = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise ParameterLoadError(f"Cannot read tax parameters from {source}: {exc}") from exc
    try:
        parameters = TaxParameters.model_validate_json(payload)
    except ValidationError as exc:
        raise ParameterLoadError(f"Invalid tax parameters in {source}: {exc}") from exc
    logger.info("Loaded tax parameters: tax_year=%s source=%s", parameters.tax_year, source)
    return parameters


@lru_cache(maxsize=None)
def load_parameters(year: int) -> TaxParameters:
    try:
        path = _discover()[year]
    except KeyError as exc:
        raise ParameterLoadError(f"Unsupported tax year {year}") from exc
    return parameters_from_path(path)


@lru_cache(maxsize=1)
def default_parameters() -> TaxParameters:
    from qcfinance.config import get_settings

    settings = get_settings()
    if settings.parameters_path:
        return parameters_from_path(settings.parameters_path)
    return load_parameters(settings.tax_year)


__all__ = [
    "ParameterLoadError",
    "SUPPORTED_YEARS",
    "default_parameters",
    "load_parameters",
    "parameters_from_path",
]
