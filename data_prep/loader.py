"""
Build an immutable ScenarioInput from serialized records.

The household, assumptions and tax profile sections are required to make
sense of anything else, so a problem there raises ScenarioError. Item lists
(incomes, expenses, accounts, loans, goals, contributions) are validated one
record at a time; a record that fails validation is logged and dropped.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple, Type, Union

from pydantic import ValidationError

from core.errors import ScenarioError
from core.schema import ScenarioInput

from .records import (
    AccountRecord,
    AssumptionsRecord,
    ContributionRecord,
    ExpenseRecord,
    GoalRecord,
    HouseholdRecord,
    IncomeRecord,
    LoanRecord,
    TaxProfileRecord,
    _Record,
)

logger = logging.getLogger(__name__)

ITEM_SECTIONS: Dict[str, Type[_Record]] = {
    "incomes": IncomeRecord,
    "expenses": ExpenseRecord,
    "accounts": AccountRecord,
    "loans": LoanRecord,
    "goals": GoalRecord,
    "contributions": ContributionRecord,
}


def read_scenario_json(source: Union[str, Path]) -> Dict[str, Any]:
    """Parse a JSON document or the path to one."""
    if isinstance(source, Path) or not str(source).lstrip().startswith("{"):
        text = Path(source).read_text(encoding="utf-8")
    else:
        text = str(source)
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ScenarioError(f"Scenario is not valid JSON: {exc}") from exc


def _section(model: Type[_Record], raw: Any, name: str):
    try:
        return model.model_validate(raw or {})
    except ValidationError as exc:
        raise ScenarioError(f"Invalid {name}: {exc}") from exc


def _items(name: str, raw: Any, strict: bool) -> Tuple[Any, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ScenarioError(f"'{name}' must be a list, got {type(raw).__name__}")
    model = ITEM_SECTIONS[name]
    out: List[Any] = []
    for i, record in enumerate(raw):
        try:
            out.append(model.model_validate(record).to_domain())
        except ValidationError as exc:
            ident = record.get("id", f"#{i}") if isinstance(record, Mapping) else f"#{i}"
            if strict:
                raise ScenarioError(f"Invalid {name} record {ident}: {exc}") from exc
            logger.warning(
                "Dropping %s record %s: %d validation error(s)", name, ident, exc.error_count()
            )
    return tuple(out)


def load_scenario(
    source: Union[Mapping[str, Any], str, Path],
    *,
    strict: bool = False,
) -> ScenarioInput:
    """
    Parameters
    ----------
    source : mapping, JSON string, or path
        Scenario document with household, assumptions, taxProfile and item lists.
    strict : bool
        Raise on the first invalid item record instead of dropping it.
    """
    data = source if isinstance(source, Mapping) else read_scenario_json(source)

    household = _section(HouseholdRecord, data.get("household"), "household").to_domain()
    assumptions = _section(AssumptionsRecord, data.get("assumptions"), "assumptions").to_domain()
    tax_profile = _section(TaxProfileRecord, data.get("taxProfile"), "taxProfile").to_domain()

    items = {name: _items(name, data.get(name), strict) for name in ITEM_SECTIONS}
    scenario = ScenarioInput(
        household=household,
        assumptions=assumptions,
        tax_profile=tax_profile,
        **items,
    )
    logger.debug(
        "Loaded scenario: %s",
        ", ".join(f"{len(v)} {k}" for k, v in items.items()),
    )
    return scenario
