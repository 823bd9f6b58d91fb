"""
Smoke tests for the plotly figure builders.
"""

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from envreports.hierarchical import cluster_frame
from envreports.plotting import (
    cv_heatmap, dendrogram_figure, heatmap_chart, importance_chart, predicted_vs_actual_chart,
)


def test_dendrogram_figure_draws_every_merge():
    frame = pd.DataFrame(
        np.random.RandomState(3).normal(size=(6, 3)),
        index=[f"site_{i}" for i in range(6)],
    )
    tree = cluster_frame(frame, linkage="complete")
    fig = dendrogram_figure(tree, frame.values, title="Sites")

    assert isinstance(fig, go.Figure)
    assert len(fig.data) == 5
    assert max(max(trace.y) for trace in fig.data) == max(tree.heights)
    assert set(fig.layout.xaxis.ticktext) == set(frame.index)


def test_heatmap_chart_keeps_labels():
    data = pd.DataFrame([[1.0, -1.0], [0.5, 0.0]], index=["a", "b"], columns=["x", "y"])
    fig = heatmap_chart(data, title="Profiles")

    assert list(fig.data[0].x) == ["x", "y"]
    assert list(fig.data[0].y) == ["a", "b"]
    assert fig.layout.title.text == "Profiles"


def test_importance_chart_uses_labels():
    importances = pd.DataFrame({"feature": ["temp", "RH"], "importance": [0.7, 0.3]})
    fig = importance_chart(importances, labels={"temp": "Temperature"})

    assert "Temperature" in list(fig.data[0].y)


def test_predicted_vs_actual_has_reference_line():
    fig = predicted_vs_actual_chart([0.0, 1.0, 2.0], [0.5, 1.0, 1.5])

    assert len(fig.data) == 2
    assert list(fig.data[1].x) == [0.0, 2.0]


def test_cv_heatmap_pivots_grid():
    # object dtype, as cv_results_frame returns it, so None survives
    table = pd.DataFrame({
        "max_depth": pd.Series([None, 5, None, 5], dtype=object),
        "min_samples_leaf": [1, 1, 5, 5],
        "mean_rmse": [1.0, 1.2, 1.1, 1.3],
    })
    fig = cv_heatmap(table, "max_depth", "min_samples_leaf")

    assert np.array(fig.data[0].z).shape == (2, 2)
    assert sorted(fig.data[0].y) == ["5", "None"]


def test_cv_heatmap_keeps_unbounded_depth_from_search():
    from envreports.ml_helpers import cv_results_frame, tune_random_forest

    rng = np.random.RandomState(0)
    X = pd.DataFrame({"a": rng.uniform(size=60), "b": rng.uniform(size=60)})
    y = X["a"] * 3
    search = tune_random_forest(
        X, y, param_grid={"n_estimators": [5], "max_depth": [None, 3], "min_samples_leaf": [1, 5]},
        cv=3, seed=0, n_jobs=1,
    )
    fig = cv_heatmap(cv_results_frame(search), "max_depth", "min_samples_leaf")

    assert np.array(fig.data[0].z).shape == (2, 2)
    assert "None" in list(fig.data[0].y)
