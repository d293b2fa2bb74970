"""Measured-variable registry.

Loads variable_definitions.yaml and provides helpers to:
- Build axis and colour-bar labels ('Temperature [°C]')
- Look up the default palette and direction for a variable
- Map exported column names onto canonical column names
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

import yaml

from downcast.models.core import MeasuredVariable

_DEFINITIONS_PATH = Path(__file__).parent / "variable_definitions.yaml"


@lru_cache(maxsize=1)
def _load_definitions() -> dict:
    with open(_DEFINITIONS_PATH, encoding="utf-8") as f:
        return yaml.safe_load(f)


def _entry(variable: MeasuredVariable | str) -> dict:
    name = MeasuredVariable.parse(variable).value
    return _load_definitions()["variables"].get(name, {})


def get_display_label(variable: MeasuredVariable | str) -> str:
    var = MeasuredVariable.parse(variable)
    return _entry(var).get("label", var.value.replace("_", " ").title())


def get_unit(variable: MeasuredVariable | str) -> str:
    return _entry(variable).get("unit", "")


def get_axis_label(variable: MeasuredVariable | str) -> str:
    """Full label such as 'Temperature [°C]'; unitless variables get no brackets."""
    label = get_display_label(variable)
    unit = get_unit(variable)
    if unit:
        return f"{label} [{unit}]"
    return label


def get_default_palette(variable: MeasuredVariable | str) -> str | None:
    return _entry(variable).get("palette")


def get_default_direction(variable: MeasuredVariable | str) -> int:
    return int(_entry(variable).get("direction", 1))


@lru_cache(maxsize=1)
def get_column_aliases() -> dict[str, str]:
    """Return {exported column name: canonical column name}."""
    defs = _load_definitions()
    aliases: dict[str, str] = {}
    for name, entry in defs.get("variables", {}).items():
        for alias in entry.get("aliases", []):
            aliases[alias] = name
    for name, names in defs.get("columns", {}).items():
        for alias in names:
            aliases[alias] = name
    return aliases
