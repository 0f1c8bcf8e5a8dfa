from __future__ import annotations

import json
import logging
import secrets
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from qcfinance.core.models import SimulationRequest, SimulatorResult

logger = logging.getLogger("qcfinance").getChild("scenarios")


class ScenarioNotFoundError(KeyError):
    pass


class ScenarioDraft(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    gross_salary: Decimal
    city_id: str
    city_name: str
    has_partner: bool = False
    has_car: bool = False
    children_count: int = 0
    disposable_income: Decimal
    savings_rate: Decimal
    monthly_expenses: Decimal

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_simulation(
        cls, name: str, request: SimulationRequest, result: SimulatorResult
    ) -> "ScenarioDraft":
        return cls(
            name=name,
            gross_salary=result.tax.gross_annual,
            city_id=result.city.id,
            city_name=result.city.name,
            has_partner=request.has_partner,
            has_car=request.has_car,
            children_count=request.children_count,
            disposable_income=result.disposable_income,
            savings_rate=result.savings_rate,
            monthly_expenses=result.monthly_expenses,
        )


class SavedScenario(ScenarioDraft):
    id: str
    created_at: datetime


_SCENARIO_LIST = TypeAdapter(list[SavedScenario])


def _stamp(draft: ScenarioDraft) -> SavedScenario:
    return SavedScenario(
        **draft.model_dump(),
        id=f"scenario_{secrets.token_hex(6)}",
        created_at=datetime.now(timezone.utc),
    )


class ScenarioStore(Protocol):
    def save(self, draft: ScenarioDraft) -> SavedScenario: ...

    def list(self) -> list[SavedScenario]: ...

    def get(self, scenario_id: str) -> SavedScenario: ...

    def delete(self, scenario_id: str) -> bool: ...

    def clear(self) -> None: ...


class _ListBackedStore:
    """Newest-first list of scenarios, trimmed to ``max_scenarios``."""

    def __init__(self, max_scenarios: int = 10) -> None:
        self.max_scenarios = max(1, max_scenarios)

    def _read(self) -> list[SavedScenario]:
        raise NotImplementedError

    def _write(self, scenarios: list[SavedScenario]) -> None:
        raise NotImplementedError

    def save(self, draft: ScenarioDraft) -> SavedScenario:
        scenario = _stamp(draft)
        scenarios = [scenario, *self._read()][: self.max_scenarios]
        self._write(scenarios)
        logger.info("Saved scenario %s (%s)", scenario.id, scenario.city_id)
        return scenario

    def list(self) -> list[SavedScenario]:
        return list(self._read())

    def get(self, scenario_id: str) -> SavedScenario:
        for scenario in self._read():
            if scenario.id == scenario_id:
                return scenario
        raise ScenarioNotFoundError(scenario_id)

    def delete(self, scenario_id: str) -> bool:
        scenarios = self._read()
        remaining = [s for s in scenarios if s.id != scenario_id]
        if len(remaining) == len(scenarios):
            return False
        self._write(remaining)
        return True

    def clear(self) -> None:
        self._write([])


class InMemoryScenarioStore(_ListBackedStore):
    def __init__(self, max_scenarios: int = 10) -> None:
        super().__init__(max_scenarios)
        self._scenarios: list[SavedScenario] = []

    def _read(self) -> list[SavedScenario]:
        return list(self._scenarios)

    def _write(self, scenarios: list[SavedScenario]) -> None:
        self._scenarios = list(scenarios)


class JsonScenarioStore(_ListBackedStore):
    FILENAME = "scenarios.json"

    def __init__(self, base_dir: str | Path, max_scenarios: int = 10) -> None:
        super().__init__(max_scenarios)
        self.base = Path(base_dir)
        self.base.mkdir(parents=True, exist_ok=True)
        self.path = self.base / self.FILENAME

    def _read(self) -> list[SavedScenario]:
        if not self.path.exists():
            return []
        try:
            return _SCENARIO_LIST.validate_json(self.path.read_bytes())
        except ValueError as exc:
            logger.warning("Ignoring unreadable scenario file %s: %s", self.path, exc)
            return []

    def _write(self, scenarios: list[SavedScenario]) -> None:
        payload = _SCENARIO_LIST.dump_python(scenarios, mode="json")
        tmp = self.path.with_suffix(".tmp")
        tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp.replace(self.path)


__all__ = [
    "InMemoryScenarioStore",
    "JsonScenarioStore",
    "SavedScenario",
    "ScenarioDraft",
    "ScenarioNotFoundError",
    "ScenarioStore",
]
