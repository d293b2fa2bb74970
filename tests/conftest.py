"""Shared fixtures for downcast tests."""

from __future__ import annotations

from datetime import date

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pandas as pd
import pytest

from downcast.models.core import Observation, observations_to_frame


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


@pytest.fixture
def p7cbi_observations() -> list[Observation]:
    """Site P7CBI, 2017: two full casts and one single-reading visit."""
    obs = []
    for day, temps in ((date(2017, 5, 10), (18.2, 17.5, 16.9)), (date(2017, 7, 12), (24.1, 22.8, None))):
        for depth, temp in zip((0.5, 2.0, 4.0), temps):
            obs.append(Observation(site_id="P7CBI", sample_date=day, depth=depth, temperature=temp))
    obs.append(Observation(site_id="P7CBI", sample_date=date(2017, 9, 3), depth=1.0, temperature=21.0))
    obs.append(Observation(site_id="P7CBI", sample_date=date(2017, 9, 3), depth=None, temperature=20.5))
    return obs


@pytest.fixture
def p7cbi_frame(p7cbi_observations) -> pd.DataFrame:
    return observations_to_frame(p7cbi_observations)


def _cast(site: str, day: date, n_depths: int, temp: float = 15.0) -> list[Observation]:
    return [
        Observation(site_id=site, sample_date=day, depth=0.5 + i, temperature=temp - i * 0.3, salinity=30.0 + i * 0.1)
        for i in range(n_depths)
    ]


@pytest.fixture
def multi_site_frame() -> pd.DataFrame:
    """Three sites over 2016-2018 with different sampling densities.

    - DENSE: 4 full casts per year in 2016, 2017, 2018 (12 events)
    - SPARSE: one full cast in 2017, one single-reading visit in 2018 (1 event)
    - NULLS: two visits in 2018 where depth is never recorded (0 events)
    """
    obs: list[Observation] = []
    for year in (2016, 2017, 2018):
        for month in (3, 6, 9, 12):
            obs += _cast("DENSE", date(year, month, 15), 4, temp=10.0 + month)
    obs += _cast("SPARSE", date(2017, 8, 1), 3)
    obs += _cast("SPARSE", date(2018, 8, 1), 1)
    for day in (date(2018, 4, 2), date(2018, 5, 2)):
        obs += [Observation(site_id="NULLS", sample_date=day, depth=None, temperature=12.0) for _ in range(3)]
    return observations_to_frame(obs)


@pytest.fixture
def raw_export() -> pd.DataFrame:
    """A raw table as it comes out of the sonde export, with exported column names."""
    return pd.DataFrame({
        "Site": ["P7CBI", "P7CBI", "P7CBI", "P7CBI", "Q2"],
        "Date": ["2017-05-10", "2017-05-10", "2017-05-10", "not a date", "2018-06-01"],
        "Time": ["09:15:00", "09:16:30", "09:18", "10:00:00", "11:00:00"],
        "Depth": [0.5, 2.0, "bad", 1.0, 3.0],
        "Temp": [18.2, 17.5, 16.9, 15.0, 14.0],
        "Turb": [1.2, 0.3, 0.8, 2.0, 5.0],
        "Turb_flag": ["", "<", None, "", ""],
        "Chl": [2.5, None, 1.1, 0.9, 3.3],
    })
