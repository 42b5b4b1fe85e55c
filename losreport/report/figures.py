"""
Plotly figures for the length-of-stay report.
"""
import pandas as pd
import numpy as np
import plotly.express as px
import plotly.graph_objects as go
from typing import Optional

from losreport.config import DATA_CONFIG, MODEL_CONFIG, REPORT_CONFIG
from losreport.data.schema import StayBucket, category_values
from losreport.report.eda import value_counts_table, sample_for_plot


def category_bar(df: pd.DataFrame, column: str, title: Optional[str] = None) -> go.Figure:
    table = value_counts_table(df.dropna(subset=[column]), column).reset_index()
    if column == DATA_CONFIG.stay_column:
        order = category_values(StayBucket)
        table[column] = pd.Categorical(table[column], categories=order, ordered=True)
        table = table.sort_values(column)
        table[column] = table[column].astype(str)
    fig = px.bar(
        table,
        x=column,
        y="count",
        text="percent",
        title=title or f"Admissions by {column.replace('_', ' ')}",
        color_discrete_sequence=["#1f77b4"]
    )
    fig.update_traces(texttemplate="%{text:.1f}%", textposition="outside")
    return fig


def crosstab_heatmap(table: pd.DataFrame, title: str) -> go.Figure:
    fig = px.imshow(
        table,
        text_auto=".1f",
        color_continuous_scale="Blues",
        aspect="auto",
        title=title
    )
    return fig


def correlation_heatmap(corr: pd.DataFrame) -> go.Figure:
    fig = px.imshow(
        corr,
        labels=dict(color="Correlation"),
        x=corr.columns,
        y=corr.columns,
        color_continuous_scale="RdBu_r",
        zmin=-1, zmax=1,
        text_auto=".2f",
        title="Correlation Matrix"
    )
    fig.update_layout(height=600)
    return fig


def stay_scatter(df: pd.DataFrame, x: str, y: str = "stay_midpoint") -> go.Figure:
    """Jittered scatter on a seeded sub-sample."""
    sample = sample_for_plot(df, REPORT_CONFIG.scatter_sample_size, REPORT_CONFIG.scatter_random_state)
    rng = np.random.default_rng(REPORT_CONFIG.scatter_random_state)
    sample = sample.assign(_jitter_y=sample[y] + rng.uniform(-2, 2, len(sample)))
    fig = px.scatter(
        sample,
        x=x,
        y="_jitter_y",
        opacity=0.4,
        labels={"_jitter_y": y},
        title=f"{y.replace('_', ' ').title()} vs {x.replace('_', ' ').title()} ({len(sample)} sampled rows)"
    )
    return fig


def stay_box(df: pd.DataFrame, category: str) -> go.Figure:
    sample = sample_for_plot(df, REPORT_CONFIG.pair_sample_size, REPORT_CONFIG.pair_random_state)
    return px.box(
        sample,
        x=category,
        y=MODEL_CONFIG.target_column,
        title=f"Log Stay by {category.replace('_', ' ')} ({len(sample)} sampled rows)"
    )


def coefficient_plot(summary: pd.DataFrame) -> go.Figure:
    """Point estimates with their confidence intervals, intercept excluded."""
    table = summary.drop(index="const", errors="ignore")
    fig = go.Figure(go.Scatter(
        x=table["coef"],
        y=table.index,
        mode="markers",
        marker=dict(size=9, color="#d62728"),
        error_x=dict(
            type="data",
            symmetric=False,
            array=table["ci_upper"] - table["coef"],
            arrayminus=table["coef"] - table["ci_lower"],
        ),
    ))
    fig.add_vline(x=0, line_dash="dash", line_color="grey")
    fig.update_layout(
        title="OLS Coefficients with 95% Confidence Intervals",
        xaxis_title="Effect on log stay",
        yaxis_title="Predictor"
    )
    return fig


def residual_histogram(residuals: pd.Series, bins: Optional[int] = None) -> go.Figure:
    fig = px.histogram(
        residuals.to_frame("residual"),
        x="residual",
        nbins=bins or REPORT_CONFIG.histogram_bins,
        title="Test Residuals (observed - predicted, log scale)",
        color_discrete_sequence=["#2ca02c"]
    )
    fig.add_vline(x=0, line_dash="dash", line_color="grey")
    return fig


def predicted_vs_observed(observed: pd.Series, predicted: pd.Series) -> go.Figure:
    frame = pd.DataFrame({"observed": np.asarray(observed), "predicted": np.asarray(predicted)})
    frame = sample_for_plot(frame, REPORT_CONFIG.scatter_sample_size, REPORT_CONFIG.scatter_random_state)
    fig = px.scatter(
        frame,
        x="predicted",
        y="observed",
        opacity=0.4,
        title="Observed vs Predicted (log scale)"
    )
    lo = float(min(frame["observed"].min(), frame["predicted"].min()))
    hi = float(max(frame["observed"].max(), frame["predicted"].max()))
    fig.add_trace(go.Scatter(x=[lo, hi], y=[lo, hi], mode="lines", name="y = x",
                             line=dict(dash="dash", color="grey")))
    return fig
