"""
Tests for descriptive statistics and standardization helpers.
"""

import numpy as np
import pandas as pd
import pytest

from envreports.stats_helpers import (
    correlation_matrix, descriptive_stats, missing_report, normality_test, standardize,
    summary_table,
)


@pytest.fixture
def frame():
    return pd.DataFrame(
        {
            "ph": [6.0, 7.0, 8.0, np.nan],
            "calcium": [1.0, 2.0, 3.0, 4.0],
            "site": ["a", "b", "c", "d"],
        },
        index=["a", "b", "c", "d"],
    )


class TestDescriptiveStats:
    """Test suite for descriptive_stats and summary_table."""

    def test_ignores_missing(self, frame):
        result = descriptive_stats(frame["ph"])

        assert result["count"] == 3
        assert result["mean"] == pytest.approx(7.0)
        assert result["iqr"] == pytest.approx(1.0)

    def test_summary_table_rows_and_labels(self, frame):
        table = summary_table(frame, ["ph", "calcium"], labels={"ph": "pH"})

        assert table.index.tolist() == ["pH", "calcium"]
        assert table.loc["calcium", "max"] == 4.0
        assert "skewness" in table.columns


class TestMissingReport:
    """Test suite for missing_report."""

    def test_counts_and_percent(self, frame):
        report = missing_report(frame)

        assert report.index[0] == "ph"
        assert report.loc["ph", "missing"] == 1
        assert report.loc["ph", "percent"] == 25.0
        assert report.loc["calcium", "missing"] == 0


class TestStandardize:
    """Test suite for standardize."""

    def test_zero_mean_unit_variance(self):
        df = pd.DataFrame({"x": [1.0, 2.0, 3.0, 4.0], "y": [10.0, 20.0, 30.0, 60.0]},
                          index=list("abcd"))
        scaled = standardize(df)

        assert scaled.index.tolist() == list("abcd")
        assert scaled.columns.tolist() == ["x", "y"]
        assert np.allclose(scaled.mean(), 0.0)
        assert np.allclose(scaled.std(ddof=0), 1.0)

    def test_selected_columns_only(self, frame):
        scaled = standardize(frame, ["calcium"])
        assert scaled.columns.tolist() == ["calcium"]

    def test_default_skips_non_numeric(self, frame):
        scaled = standardize(frame.dropna())
        assert "site" not in scaled.columns


class TestCorrelationAndNormality:
    """Test suite for correlation_matrix and normality_test."""

    def test_correlation_numeric_only(self, frame):
        corr = correlation_matrix(frame)

        assert corr.columns.tolist() == ["ph", "calcium"]
        assert corr.loc["ph", "calcium"] == pytest.approx(1.0)

    def test_normality_on_normal_sample(self):
        data = np.random.RandomState(1).normal(size=200)
        stat, p = normality_test(data)

        assert 0 < stat <= 1
        assert p > 0.01
