"""
Console and HTML rendering of a finished report run.
"""
import html
import pandas as pd
from pathlib import Path
from typing import List, Optional, Tuple

import plotly.graph_objects as go

from losreport.config import DATA_CONFIG, REPORT_CONFIG, logger
from losreport.models.train import day_scale_metrics, exponentiate_metrics
from losreport.pipeline import ReportResult
from losreport.report import eda, figures

APPROXIMATION_NOTE = (
    "exp(metric) values are not errors in days: exp(mean|r|) is the typical "
    "multiplicative error factor, and exp(mean(x)) differs from mean(exp(x)). "
    "Day-scale errors are recomputed on exponentiated predictions."
)


def build_tables(result: ReportResult) -> List[Tuple[str, pd.DataFrame]]:
    """Titled tables in report order."""
    tables = []
    for col, table in eda.categorical_overview(result.raw).items():
        tables.append((f"Distinct values: {col}", table))

    tables.append(("Missing values", eda.missing_values_table(result.raw)))
    tables.append((
        "Illness severity by admission type (row %)",
        eda.crosstab_table(result.raw, DATA_CONFIG.admission_column, DATA_CONFIG.severity_column, normalize=True),
    ))
    tables.append((
        "Stay by illness severity (counts)",
        eda.crosstab_table(result.raw, DATA_CONFIG.severity_column, DATA_CONFIG.stay_column),
    ))
    tables.append((
        "Correlation with log stay (training set)",
        eda.target_correlations(result.train).to_frame("correlation"),
    ))
    tables.append(("OLS coefficients", result.model.summary()))
    tables.append(("Test metrics (log scale)", result.evaluation.metrics_table()))
    tables.append((
        "Test metrics (days, recomputed on exp(predictions))",
        pd.DataFrame({"value": pd.Series(day_scale_metrics(result.evaluation, result.y_test))}),
    ))
    tables.append((
        "exp(metric) approximation",
        pd.DataFrame({"value": pd.Series(exponentiate_metrics(result.evaluation))}),
    ))
    return tables


def build_figures(result: ReportResult) -> List[go.Figure]:
    train = result.train
    return [
        figures.category_bar(result.raw, DATA_CONFIG.stay_column),
        figures.category_bar(result.raw, DATA_CONFIG.admission_column),
        figures.crosstab_heatmap(
            eda.crosstab_table(result.raw, DATA_CONFIG.admission_column, DATA_CONFIG.severity_column, normalize=True),
            "Illness Severity by Admission Type (row %)",
        ),
        figures.correlation_heatmap(eda.correlation_matrix(train)),
        figures.stay_scatter(train, "patient_visitors"),
        figures.stay_box(train, "illness_severity_code"),
        figures.coefficient_plot(result.model.summary()),
        figures.residual_histogram(result.evaluation.residuals),
        figures.predicted_vs_observed(result.y_test, result.evaluation.predictions),
    ]


def print_report(result: ReportResult) -> None:
    """Print the report tables and headline values to console."""
    print("=" * 60)
    print("LENGTH OF STAY REGRESSION REPORT")
    print("=" * 60)
    print(f"\nRows: {len(result.raw)} (train {len(result.train)} / test {len(result.test)})")
    print(f"Bed grade fill value (training mean): {result.params.bed_grade_fill:.4f}")

    with pd.option_context("display.width", 120, "display.max_columns", 20):
        for title, table in build_tables(result):
            print(f"\n--- {title} ---")
            print(table.to_string(float_format=lambda v: f"{v:.4f}"))

    print(f"\nNote: {APPROXIMATION_NOTE}")


def render_html(result: ReportResult, title: str = "Length of Stay Regression Report") -> str:
    """Standalone HTML document with all tables and figures."""
    parts = [
        "<!DOCTYPE html>",
        "<html><head><meta charset='utf-8'>",
        f"<title>{html.escape(title)}</title>",
        "<style>body{font-family:sans-serif;margin:2rem;} table{border-collapse:collapse;margin-bottom:1.5rem;}"
        " td,th{border:1px solid #ccc;padding:4px 8px;text-align:right;} .note{color:#666;}</style>",
        "</head><body>",
        f"<h1>{html.escape(title)}</h1>",
        f"<p>Rows: {len(result.raw)} (train {len(result.train)} / test {len(result.test)}). "
        f"Bed grade fill value (training mean): {result.params.bed_grade_fill:.4f}.</p>",
    ]

    for title_, table in build_tables(result):
        parts.append(f"<h2>{html.escape(title_)}</h2>")
        parts.append(table.to_html(float_format=lambda v: f"{v:.4f}"))

    parts.append(f"<p class='note'>{html.escape(APPROXIMATION_NOTE)}</p>")

    for i, fig in enumerate(build_figures(result)):
        parts.append(fig.to_html(full_html=False, include_plotlyjs="cdn" if i == 0 else False))

    parts.append("</body></html>")
    return "\n".join(parts)


def save_html(result: ReportResult, output_path: Optional[str] = None) -> str:
    path = Path(output_path or REPORT_CONFIG.output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(render_html(result))
    logger.info(f"Report written to {path}")
    return str(path)
