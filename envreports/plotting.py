"""Shared Plotly plotting helpers."""
import plotly.express as px
import plotly.figure_factory as ff
import plotly.graph_objects as go

from envreports.constants import ACCENT_COLOR, PRIMARY_COLOR


def apply_common_layout(fig, title=None, height=500):
    """Apply common layout settings to a Plotly figure."""
    fig.update_layout(
        template="plotly_white",
        height=height,
        title=title,
        title_x=0.5,
        margin=dict(t=60, b=40, l=60, r=40),
    )
    return fig


def dendrogram_figure(tree, matrix, title=None, height=450, threshold_ratio=0.7):
    """Draw a merge tree with plotly's dendrogram.

    ``matrix`` is the feature matrix the tree was built from; plotly only needs
    it for the leaf count, the merges themselves come from the tree.
    """
    Z = tree.to_linkage_matrix()
    fig = ff.create_dendrogram(
        matrix,
        labels=list(tree.labels),
        linkagefun=lambda _: Z,
        color_threshold=threshold_ratio * max(tree.heights),
    )
    fig.update_layout(xaxis_title="Site", yaxis_title="Distance")
    return apply_common_layout(fig, title, height)


def heatmap_chart(data, x_label="", y_label="", title=None, height=500,
                  color_scale="RdBu_r", text_auto=".2f"):
    """Create an annotated heatmap from a DataFrame."""
    fig = px.imshow(
        data.values,
        x=[str(c) for c in data.columns],
        y=[str(i) for i in data.index],
        color_continuous_scale=color_scale,
        text_auto=text_auto, aspect="auto",
    )
    fig.update_layout(xaxis_title=x_label, yaxis_title=y_label)
    return apply_common_layout(fig, title, height)


def histogram_chart(df, x, color=None, title=None, nbins=50, labels=None, height=400):
    """Create a histogram."""
    fig = px.histogram(df, x=x, color=color, nbins=nbins, labels=labels or {},
                       title=title, opacity=0.8,
                       color_discrete_sequence=[PRIMARY_COLOR, ACCENT_COLOR])
    return apply_common_layout(fig, title, height)


def importance_chart(importances, labels=None, title="Feature Importance", height=400):
    """Horizontal bar chart of a feature_importance_frame."""
    data = importances.assign(
        label=importances["feature"].map(lambda f: (labels or {}).get(f, f))
    ).sort_values("importance")
    fig = px.bar(data, x="importance", y="label", orientation="h",
                 labels={"importance": "Importance", "label": "Feature"})
    fig.update_traces(marker_color=PRIMARY_COLOR)
    return apply_common_layout(fig, title, height)


def predicted_vs_actual_chart(y_true, y_pred, title="Predicted vs Actual", height=450,
                              axis_label="log(1 + area)"):
    """Scatter of predictions against truth with the y = x reference line."""
    lo = float(min(min(y_true), min(y_pred)))
    hi = float(max(max(y_true), max(y_pred)))
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=list(y_true), y=list(y_pred), mode="markers",
        marker=dict(color=PRIMARY_COLOR, opacity=0.6), name="Test fires",
    ))
    fig.add_trace(go.Scatter(
        x=[lo, hi], y=[lo, hi], mode="lines",
        line=dict(color=ACCENT_COLOR, dash="dash"), name="Perfect prediction",
    ))
    fig.update_layout(xaxis_title=f"Actual {axis_label}", yaxis_title=f"Predicted {axis_label}")
    return apply_common_layout(fig, title, height)


def cv_heatmap(cv_table, row_param, col_param, title="Cross-Validated RMSE", height=400):
    """Best mean CV RMSE for each pair of two grid parameters."""
    pivot = (
        cv_table.assign(**{row_param: cv_table[row_param].map(str),
                           col_param: cv_table[col_param].map(str)})
        .pivot_table(index=row_param, columns=col_param, values="mean_rmse", aggfunc="min")
    )
    return heatmap_chart(pivot, x_label=col_param, y_label=row_param, title=title,
                         height=height, color_scale="Blues_r", text_auto=".3f")
