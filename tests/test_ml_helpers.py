"""
Tests for random-forest regression helpers on a small synthetic dataset.
"""

import numpy as np
import pandas as pd
import pytest
from sklearn.ensemble import RandomForestRegressor

from envreports.ml_helpers import (
    back_transform, cv_results_frame, feature_importance_frame, prepare_regression_data,
    regression_metrics, tune_random_forest,
)

SMALL_GRID = {"n_estimators": [10], "max_depth": [2, None]}


@pytest.fixture
def synthetic():
    """120 rows where the target depends only on 'signal'."""
    rng = np.random.RandomState(0)
    df = pd.DataFrame({
        "signal": rng.uniform(0, 10, 120),
        "noise": rng.normal(size=120),
    })
    df["target"] = 2.0 * df["signal"] + rng.normal(scale=0.1, size=120)
    return df


@pytest.fixture
def search(synthetic):
    return tune_random_forest(
        synthetic[["signal", "noise"]], synthetic["target"],
        param_grid=SMALL_GRID, cv=3, seed=0, n_jobs=1,
    )


class TestPrepareRegressionData:
    """Test suite for prepare_regression_data."""

    def test_split_sizes(self, synthetic):
        X_train, X_test, y_train, y_test = prepare_regression_data(
            synthetic, ["signal", "noise"], "target", test_size=0.25
        )

        assert len(X_train) == 90
        assert len(X_test) == 30
        assert X_train.columns.tolist() == ["signal", "noise"]
        assert X_train.index.equals(y_train.index)

    def test_drops_incomplete_rows(self, synthetic):
        synthetic.loc[:9, "noise"] = np.nan
        X_train, X_test, _, _ = prepare_regression_data(synthetic, ["signal", "noise"], "target")

        assert len(X_train) + len(X_test) == 110


class TestRegressionMetrics:
    """Test suite for regression_metrics."""

    def test_perfect_prediction(self):
        m = regression_metrics([1.0, 2.0, 3.0], [1.0, 2.0, 3.0])

        assert m["mse"] == 0
        assert m["rmse"] == 0
        assert m["mae"] == 0
        assert m["r2"] == 1.0

    def test_known_errors(self):
        m = regression_metrics([0.0, 0.0], [1.0, -3.0])

        assert m["mse"] == pytest.approx(5.0)
        assert m["rmse"] == pytest.approx(np.sqrt(5.0))
        assert m["mae"] == pytest.approx(2.0)


class TestTuneRandomForest:
    """Test suite for grid search and its reporting helpers."""

    def test_best_params_from_grid(self, search):
        assert search.best_params_["n_estimators"] == 10
        assert search.best_params_["max_depth"] in (2, None)
        assert isinstance(search.best_estimator_, RandomForestRegressor)

    def test_learns_signal(self, search, synthetic):
        pred = search.best_estimator_.predict(synthetic[["signal", "noise"]])
        assert regression_metrics(synthetic["target"], pred)["r2"] > 0.9

    def test_cv_results_frame(self, search):
        table = cv_results_frame(search)

        assert len(table) == 2
        assert {"n_estimators", "max_depth", "mean_rmse", "rank"} <= set(table.columns)
        assert table["rank"].tolist() == sorted(table["rank"].tolist())
        assert (table["mean_rmse"] > 0).all()

    def test_feature_importance_frame(self, search):
        importances = feature_importance_frame(search.best_estimator_, ["signal", "noise"])

        assert importances["feature"].tolist()[0] == "signal"
        assert importances["importance"].sum() == pytest.approx(1.0)


class TestBackTransform:
    """Test suite for back_transform."""

    def test_inverts_log1p(self):
        area = np.array([0.0, 1.5, 100.0])
        assert back_transform(np.log1p(area)) == pytest.approx(area)

    def test_clips_negative_predictions(self):
        assert back_transform([-0.5]).tolist() == [0.0]
