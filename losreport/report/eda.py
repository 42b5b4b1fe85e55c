"""
Exploratory summaries of the admissions data.
"""
import pandas as pd
from typing import List, Optional

from losreport.config import DATA_CONFIG, MODEL_CONFIG


def value_counts_table(df: pd.DataFrame, column: str) -> pd.DataFrame:
    """Distinct values of a column with counts and percentages (missing included)."""
    counts = df[column].value_counts(dropna=False)
    table = pd.DataFrame({
        "count": counts,
        "percent": (counts / counts.sum() * 100).round(2),
    })
    table.index.name = column
    return table


def crosstab_table(df: pd.DataFrame, row: str, col: str, normalize: bool = False) -> pd.DataFrame:
    """
    Crosstab of two categorical columns.

    Args:
        normalize: If True, each row is expressed as percentages summing to 100.
    """
    if normalize:
        return (pd.crosstab(df[row], df[col], normalize="index") * 100).round(2)
    return pd.crosstab(df[row], df[col], margins=True, margins_name="Total")


def missing_values_table(df: pd.DataFrame) -> pd.DataFrame:
    missing = df.isna().sum()
    return pd.DataFrame({
        "missing": missing,
        "percent": (missing / max(len(df), 1) * 100).round(2),
    })


def target_correlations(
    df: pd.DataFrame,
    target_col: Optional[str] = None,
    columns: Optional[List[str]] = None
) -> pd.Series:
    """Pearson correlation of each predictor with the target, strongest first."""
    target_col = target_col or MODEL_CONFIG.target_column
    columns = columns or MODEL_CONFIG.feature_columns
    corr = df[columns + [target_col]].corr()[target_col].drop(target_col)
    return corr.sort_values(key=abs, ascending=False)


def correlation_matrix(df: pd.DataFrame, columns: Optional[List[str]] = None) -> pd.DataFrame:
    columns = columns or MODEL_CONFIG.feature_columns + [MODEL_CONFIG.target_column]
    return df[columns].corr()


def sample_for_plot(df: pd.DataFrame, n: int, random_state: int) -> pd.DataFrame:
    """Seeded uniform sub-sample of at most n rows, for readable plots."""
    if len(df) <= n:
        return df
    return df.sample(n=n, random_state=random_state)


def categorical_overview(df: pd.DataFrame) -> dict:
    """Count tables for each raw categorical field."""
    return {
        col: value_counts_table(df, col)
        for col in [
            DATA_CONFIG.admission_column,
            DATA_CONFIG.severity_column,
            DATA_CONFIG.bed_grade_column,
            DATA_CONFIG.stay_column,
        ]
        if col in df.columns
    }
