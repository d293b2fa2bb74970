"""Tests for sampling coverage analysis."""

from __future__ import annotations

from datetime import date

import pandas as pd
import pytest

from downcast.coverage.analyzer import (
    compute_coverage,
    coverage_table,
    event_succeeded,
    restrict_to_sites_and_years,
    select_preferred_sites,
    total_coverage,
)
from downcast.models.core import Observation


class TestEventSucceeded:
    def test_empty_group(self):
        assert event_succeeded([]) is False

    def test_single_depth(self):
        obs = [Observation(site_id="A", sample_date=date(2017, 1, 1), depth=1.0)]
        assert event_succeeded(obs) is False

    def test_two_depths(self):
        obs = [Observation(site_id="A", sample_date=date(2017, 1, 1), depth=d) for d in (1.0, 2.0)]
        assert event_succeeded(obs) is True

    def test_null_depths_not_counted(self):
        obs = [
            Observation(site_id="A", sample_date=date(2017, 1, 1), depth=1.0),
            Observation(site_id="A", sample_date=date(2017, 1, 1), depth=None),
            Observation(site_id="A", sample_date=date(2017, 1, 1), depth=None),
        ]
        assert event_succeeded(obs) is False

    def test_missing_depth_column_is_null(self):
        df = pd.DataFrame({"site_id": ["A", "A", "A"], "sample_date": ["2017-01-01"] * 3})
        assert event_succeeded(df) is False

    def test_scenario_dates(self, p7cbi_frame):
        results = [event_succeeded(grp) for _, grp in p7cbi_frame.groupby("sample_date")]
        assert results == [True, True, False]


class TestComputeCoverage:
    def test_site_year_count(self, p7cbi_frame):
        counts = compute_coverage(p7cbi_frame, ("site_id", "year", "sample_date"))
        assert counts[("P7CBI", 2017)] == 2

    def test_accepts_observation_list(self, p7cbi_observations):
        counts = compute_coverage(p7cbi_observations, ("site_id", "year", "sample_date"))
        assert counts[("P7CBI", 2017)] == 2

    def test_zero_count_groups_kept(self, multi_site_frame):
        counts = compute_coverage(multi_site_frame, ("site_id", "year", "sample_date"))
        assert counts[("NULLS", 2018)] == 0
        assert counts[("SPARSE", 2018)] == 0
        assert counts[("SPARSE", 2017)] == 1
        assert counts[("DENSE", 2016)] == 4

    def test_every_coarse_key_present(self, multi_site_frame):
        counts = compute_coverage(multi_site_frame, ("site_id", "year", "sample_date"))
        expected = set(map(tuple, multi_site_frame[["site_id", "year"]].drop_duplicates().to_numpy().tolist()))
        assert set(counts.index) == expected
        assert (counts >= 0).all()

    def test_explicit_coarse_key(self, multi_site_frame):
        counts = compute_coverage(multi_site_frame, ("site_id", "sample_date"), by=("site_id",))
        assert counts.to_dict() == {"DENSE": 12, "NULLS": 0, "SPARSE": 1}

    def test_deterministic_under_row_order(self, multi_site_frame):
        keys = ("site_id", "year", "sample_date")
        shuffled = multi_site_frame.sample(frac=1.0, random_state=7)
        first = compute_coverage(multi_site_frame, keys)
        second = compute_coverage(shuffled, keys)
        pd.testing.assert_series_equal(first, second)

    def test_empty_input(self):
        counts = compute_coverage([], ("site_id", "year", "sample_date"))
        assert counts.empty
        assert list(counts.index.names) == ["site_id", "year"]

    def test_coarse_not_in_finest(self, p7cbi_frame):
        with pytest.raises(ValueError):
            compute_coverage(p7cbi_frame, ("site_id", "sample_date"), by=("year",))

    def test_year_derived_when_column_absent(self, p7cbi_frame):
        counts = compute_coverage(p7cbi_frame.drop(columns="year"), ("site_id", "year", "sample_date"))
        assert counts[("P7CBI", 2017)] == 2


class TestPreferredSites:
    def test_low_threshold_includes_site(self, p7cbi_frame):
        assert select_preferred_sites(p7cbi_frame, threshold=1) == {"P7CBI"}

    def test_high_threshold_excludes_site(self, p7cbi_frame):
        assert select_preferred_sites(p7cbi_frame, threshold=15) == set()

    def test_threshold_is_strict(self, p7cbi_frame):
        assert select_preferred_sites(p7cbi_frame, threshold=2) == set()

    def test_multi_site(self, multi_site_frame):
        assert select_preferred_sites(multi_site_frame, threshold=0) == {"DENSE", "SPARSE"}
        assert select_preferred_sites(multi_site_frame, threshold=1) == {"DENSE"}

    def test_monotonic_in_threshold(self, multi_site_frame):
        previous = None
        for threshold in range(-1, 15):
            current = select_preferred_sites(multi_site_frame, threshold)
            if previous is not None:
                assert current <= previous
            previous = current

    def test_totals_span_years(self, multi_site_frame):
        totals = total_coverage(multi_site_frame)
        assert totals["DENSE"] == 12


class TestRestrict:
    def test_filters_sites_and_years(self, multi_site_frame):
        out = restrict_to_sites_and_years(multi_site_frame, {"DENSE", "SPARSE"}, min_year=2016)
        assert set(out["site_id"]) == {"DENSE", "SPARSE"}
        assert out["year"].min() == 2017

    def test_preserves_order(self, multi_site_frame):
        out = restrict_to_sites_and_years(multi_site_frame, {"DENSE"}, min_year=2016)
        assert list(out.index) == sorted(out.index)

    def test_idempotent(self, multi_site_frame):
        once = restrict_to_sites_and_years(multi_site_frame, {"DENSE", "NULLS"}, min_year=2017)
        twice = restrict_to_sites_and_years(once, {"DENSE", "NULLS"}, min_year=2017)
        pd.testing.assert_frame_equal(once, twice)

    def test_row_count_matches_predicate(self, multi_site_frame):
        sites = {"DENSE", "SPARSE"}
        out = restrict_to_sites_and_years(multi_site_frame, sites, min_year=2016)
        expected = ((multi_site_frame["site_id"].isin(sites)) & (multi_site_frame["year"] > 2016)).sum()
        assert len(out) == expected

    def test_no_match_is_empty(self, multi_site_frame):
        out = restrict_to_sites_and_years(multi_site_frame, {"DENSE"}, min_year=2030)
        assert out.empty

    def test_input_untouched(self, multi_site_frame):
        before = multi_site_frame.copy()
        restrict_to_sites_and_years(multi_site_frame, {"DENSE"}, min_year=2017)
        pd.testing.assert_frame_equal(multi_site_frame, before)


class TestCoverageTable:
    def test_pivot(self, multi_site_frame):
        table = coverage_table(multi_site_frame)
        assert list(table.index) == ["DENSE", "NULLS", "SPARSE"]
        assert list(table.columns) == [2016, 2017, 2018]
        assert table.loc["DENSE", 2017] == 4
        assert table.loc["NULLS", 2016] == 0
        assert table.loc["SPARSE", 2017] == 1

    def test_empty(self):
        assert coverage_table([]).empty
