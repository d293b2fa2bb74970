"""Per-run render settings loaded from YAML.

Colour domains differ between variables and sometimes between years of the
same variable, so they are supplied per run rather than inferred. Layers, from
lowest to highest precedence:

1. ProfileRenderConfig defaults
2. palette/direction from variable_definitions.yaml
3. ``defaults`` section of the settings file
4. ``variables.<name>`` section
5. ``variables.<name>.years.<year>`` section
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

from downcast.harmonize.variables import get_default_direction, get_default_palette
from downcast.models.core import MeasuredVariable, ProfileRenderConfig

_SETTABLE = {f.name for f in fields(ProfileRenderConfig)} - {"title"}


def _check_keys(section: dict, where: str) -> dict:
    unknown = set(section) - _SETTABLE
    if unknown:
        raise ValueError(f"Unknown render setting(s) {sorted(unknown)} in {where}")
    return dict(section)


@dataclass
class RenderSettings:
    """Layered render configuration for a batch of profile plots."""

    defaults: dict = field(default_factory=dict)
    variables: dict[str, dict] = field(default_factory=dict)  # keyed by canonical name
    years: dict[str, dict[int, dict]] = field(default_factory=dict)  # {variable: {year: overrides}}

    @classmethod
    def from_dict(cls, data: dict | None) -> RenderSettings:
        data = data or {}
        defaults = _check_keys(data.get("defaults") or {}, "defaults")
        variables: dict[str, dict] = {}
        years: dict[str, dict[int, dict]] = {}
        for name, section in (data.get("variables") or {}).items():
            var = MeasuredVariable.parse(name).value
            section = dict(section or {})
            year_sections = section.pop("years", None) or {}
            variables[var] = _check_keys(section, f"variables.{var}")
            years[var] = {
                int(year): _check_keys(overrides or {}, f"variables.{var}.years.{year}")
                for year, overrides in year_sections.items()
            }
        return cls(defaults=defaults, variables=variables, years=years)

    @classmethod
    def from_yaml(cls, path: Path) -> RenderSettings:
        if not path.exists():
            raise FileNotFoundError(f"Render settings not found at {path}")
        with open(path, encoding="utf-8") as f:
            return cls.from_dict(yaml.safe_load(f))

    def config_for(
        self,
        variable: MeasuredVariable | str,
        year: int | None = None,
        title: str = "",
    ) -> ProfileRenderConfig:
        """Resolve the render config for one variable (and optionally one year)."""
        var = MeasuredVariable.parse(variable).value
        merged: dict = {"direction": get_default_direction(var)}
        palette = get_default_palette(var)
        if palette:
            merged["palette"] = palette
        merged.update(self.defaults)
        merged.update(self.variables.get(var, {}))
        if year is not None:
            merged.update(self.years.get(var, {}).get(int(year), {}))
        return ProfileRenderConfig(title=title, **merged)
