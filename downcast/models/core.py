"""Core data models for sonde downcast observations and profile plots."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from datetime import date, time
from enum import Enum
from typing import Iterable

import pandas as pd

from downcast.config import (
    DATE_COL,
    DEFAULT_MISSING_COLOR,
    DEFAULT_PALETTE,
    DEFAULT_POINT_SIZE,
    DEPTH_COL,
    YEAR_COL,
)
from downcast.exceptions import InvalidVariable


class MeasuredVariable(Enum):
    TEMPERATURE = "temperature"
    SALINITY = "salinity"
    PH = "ph"
    DO_SATURATION = "do_saturation"
    DISSOLVED_OXYGEN = "dissolved_oxygen"
    TURBIDITY = "turbidity"
    CHLOROPHYLL = "chlorophyll"

    @classmethod
    def names(cls) -> list[str]:
        return [v.value for v in cls]

    @classmethod
    def parse(cls, value: MeasuredVariable | str) -> MeasuredVariable:
        """Resolve a member or its column name, raising InvalidVariable otherwise."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidVariable(value, cls.names())


@dataclass(frozen=True)
class Observation:
    """One depth reading of a sonde downcast."""

    site_id: str  # e.g. "P7CBI"
    sample_date: date
    depth: float | None = None  # m, positive downwards
    sample_time: time | None = None
    temperature: float | None = None  # degC
    salinity: float | None = None  # PSU
    ph: float | None = None
    do_saturation: float | None = None  # %
    dissolved_oxygen: float | None = None  # mg/L
    turbidity: float | None = None  # NTU
    chlorophyll: float | None = None  # ug/L
    turbidity_censored: bool = False

    @property
    def year(self) -> int:
        return self.sample_date.year

    def value(self, variable: MeasuredVariable | str) -> float | None:
        return getattr(self, MeasuredVariable.parse(variable).value)


OBSERVATION_COLUMNS = [f.name for f in fields(Observation)] + [YEAR_COL]


def observations_to_frame(observations: Iterable[Observation]) -> pd.DataFrame:
    """Build the tabular form used throughout the package.

    One row per observation, ``sample_date`` as datetimes and ``year``
    materialised as a column. Nulls become NaN.
    """
    records = []
    for obs in observations:
        row = asdict(obs)
        row[YEAR_COL] = obs.year
        records.append(row)

    df = pd.DataFrame(records, columns=OBSERVATION_COLUMNS)
    df[DATE_COL] = pd.to_datetime(df[DATE_COL])
    df[YEAR_COL] = df[YEAR_COL].astype("int64")
    for col in [DEPTH_COL, *MeasuredVariable.names()]:
        df[col] = pd.to_numeric(df[col], errors="coerce")
    df["turbidity_censored"] = df["turbidity_censored"].astype(bool)
    return df


def as_frame(observations: pd.DataFrame | Iterable[Observation]) -> pd.DataFrame:
    """Accept either a prepared DataFrame or a sequence of Observation."""
    if isinstance(observations, pd.DataFrame):
        return observations
    return observations_to_frame(observations)


@dataclass
class ProfileRenderConfig:
    """Visual encoding for one depth-vs-date plot."""

    palette: str = DEFAULT_PALETTE  # matplotlib or seaborn colormap name
    direction: int = 1  # -1 reverses the palette
    domain: tuple[float, float] | None = None  # colour clamp; fitted to data if None
    missing_color: str = DEFAULT_MISSING_COLOR
    depth_limits: tuple[float, float] | None = None  # (top, bottom) in m
    title: str = ""
    point_size: float = DEFAULT_POINT_SIZE

    def __post_init__(self):
        if self.direction not in (1, -1):
            raise ValueError(f"direction must be 1 or -1, got {self.direction!r}")
        if self.domain is not None:
            lo, hi = (float(v) for v in self.domain)
            if lo > hi:
                raise ValueError(f"domain minimum exceeds maximum: {self.domain!r}")
            self.domain = (lo, hi)
        if self.depth_limits is not None:
            top, bottom = (float(v) for v in self.depth_limits)
            self.depth_limits = (min(top, bottom), max(top, bottom))
