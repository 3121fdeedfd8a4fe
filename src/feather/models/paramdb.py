"""Parameter database translating selectors to profiles."""

import logging
import numbers
from functools import lru_cache
from importlib.resources import files
from pathlib import Path
from typing import Dict, Optional, Union

import ruamel.yaml
from pydantic import BaseModel

from ..errors import OutOfRangeSelector
from .profiles import MaterialProfile, PrecisionProfile, UseCaseProfile
from .scenario import Category, Scenario

logger = logging.getLogger(__name__)

PROFILE_TYPES = {
    Category.MATERIAL: MaterialProfile,
    Category.USE_CASE: UseCaseProfile,
    Category.PRECISION: PrecisionProfile,
}

Profile = Union[MaterialProfile, UseCaseProfile, PrecisionProfile]


class SelectorTable:
    """Closed, contiguous range of selectors mapped to immutable profiles."""

    def __init__(self, category: Category, entries: Dict[int, BaseModel], default: int):
        keys = sorted(entries)
        if not keys or keys != list(range(keys[0], keys[-1] + 1)):
            raise ValueError(f"{category.value} table must cover a contiguous range, got {keys}")
        if default not in entries:
            raise ValueError(f"default {category.value} selector {default} not in table")
        self.category = category
        self.entries = entries
        self.default = default

    @property
    def valid(self) -> range:
        keys = sorted(self.entries)
        return range(keys[0], keys[-1] + 1)

    def labels(self) -> str:
        return ", ".join(f"{p.name}={k}" for k, p in sorted(self.entries.items()))

    def lookup(self, selector) -> BaseModel:
        if (
            isinstance(selector, bool)
            or not isinstance(selector, numbers.Integral)
            or selector not in self.entries
        ):
            raise OutOfRangeSelector(
                self.category.value, selector, self.valid, self.labels()
            )
        return self.entries[int(selector)]


class ParameterDatabase:
    """Lookup tables per scenario and category, loaded from YAML."""

    def __init__(self) -> None:
        self.tables: Dict[Scenario, Dict[Category, SelectorTable]] = {}

    def load_from_yaml(self, file_path: Optional[str] = None) -> None:
        """Load tables from a YAML file, the packaged ``parameters.yaml`` by default."""
        if file_path is None:
            source = files("feather.models") / "parameters.yaml"
        else:
            source = Path(file_path)
        with source.open("r") as f:
            data = ruamel.yaml.YAML(typ="safe").load(f)
        for scenario_key, categories in data["scenarios"].items():
            scenario = Scenario(scenario_key)
            self.tables[scenario] = {}
            for category_key, table in categories.items():
                category = Category(category_key)
                profile_type = PROFILE_TYPES[category]
                entries = {
                    int(k): profile_type(**props) for k, props in table["entries"].items()
                }
                self.tables[scenario][category] = SelectorTable(
                    category, entries, int(table["default"])
                )
        logger.debug(f"Loaded parameter tables for {[s.value for s in self.tables]}")

    def table(self, scenario: Scenario, category: Category) -> SelectorTable:
        scenario, category = Scenario(scenario), Category(category)
        try:
            return self.tables[scenario][category]
        except KeyError:
            raise OutOfRangeSelector(
                category.value, None, labels=f"not used by {scenario.value}"
            ) from None

    def uses(self, scenario: Scenario, category: Category) -> bool:
        return Category(category) in self.tables.get(Scenario(scenario), {})

    def resolve(self, scenario: Scenario, category: Category, selector) -> Profile:
        return self.table(scenario, category).lookup(selector)

    def default_selector(self, scenario: Scenario, category: Category) -> int:
        return self.table(scenario, category).default

    def describe(self, scenario: Scenario, category: Category) -> str:
        """Human labels, e.g. ``Low=1, Medium=2, High=3``."""
        return self.table(scenario, category).labels()


@lru_cache(maxsize=1)
def default_database() -> ParameterDatabase:
    db = ParameterDatabase()
    db.load_from_yaml()
    return db


def resolve(category: Category, selector, scenario: Scenario = Scenario.LIGHTEN) -> Profile:
    """Resolve ``selector`` against the packaged tables."""
    return default_database().resolve(scenario, category, selector)
