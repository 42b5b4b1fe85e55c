"""Validation functions for admission records."""
import pandas as pd
import numpy as np
from dataclasses import dataclass, field
from typing import Dict, List, Any
from pathlib import Path

from losreport.config import DATA_CONFIG
from losreport.data.schema import (
    AdmissionType, IllnessSeverity, StayBucket, BED_GRADES, category_values
)


@dataclass
class ValidationIssue:
    """Single validation issue."""
    column: str
    issue_type: str
    message: str
    severity: str = "warning"


@dataclass
class ValidationReport:
    """Complete validation report."""
    is_valid: bool = True
    n_rows: int = 0
    n_cols: int = 0
    issues: List[ValidationIssue] = field(default_factory=list)
    column_stats: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def add_issue(self, column: str, issue_type: str, message: str, severity: str = "warning"):
        self.issues.append(ValidationIssue(column, issue_type, message, severity))
        if severity == "error":
            self.is_valid = False

    @property
    def errors(self) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == "error"]


def validate_column_presence(df: pd.DataFrame, expected_cols: List[str]) -> List[ValidationIssue]:
    """Check that all expected columns are present."""
    issues = []
    missing = [col for col in expected_cols if col not in df.columns]
    if missing:
        issues.append(ValidationIssue(
            "schema", "missing_columns",
            f"Missing columns: {missing}",
            severity="error"
        ))
    return issues


def validate_categories(df: pd.DataFrame) -> List[ValidationIssue]:
    """Check that categorical columns only hold known values."""
    issues = []
    domains = {
        DATA_CONFIG.admission_column: category_values(AdmissionType),
        DATA_CONFIG.severity_column: category_values(IllnessSeverity),
        DATA_CONFIG.stay_column: category_values(StayBucket),
    }
    for col, allowed in domains.items():
        if col not in df.columns:
            continue
        values = df[col].dropna().astype(str).str.strip()
        unknown = sorted(set(values.unique()) - set(allowed))
        if unknown:
            issues.append(ValidationIssue(
                col, "unknown_category",
                f"Unrecognized values: {unknown}",
                severity="error"
            ))
        na_count = df[col].isna().sum()
        if na_count > 0:
            issues.append(ValidationIssue(
                col, "missing_category",
                f"{na_count} missing values",
                severity="error"
            ))
    return issues


def validate_bed_grade(df: pd.DataFrame) -> List[ValidationIssue]:
    """Bed grade must be one of 1-4; missing values are imputed later."""
    issues = []
    col = DATA_CONFIG.bed_grade_column
    if col not in df.columns:
        return issues

    numeric = pd.to_numeric(df[col], errors="coerce")
    non_numeric = (numeric.isna() & df[col].notna()).sum()
    if non_numeric > 0:
        issues.append(ValidationIssue(
            col, "non_numeric",
            f"{non_numeric} non-numeric values",
            severity="error"
        ))

    observed = numeric.dropna()
    out_of_range = (~observed.isin(BED_GRADES)).sum()
    if out_of_range > 0:
        issues.append(ValidationIssue(
            col, "out_of_range",
            f"{out_of_range} values outside {BED_GRADES}",
            severity="error"
        ))

    na_count = df[col].isna().sum()
    if na_count > 0:
        issues.append(ValidationIssue(
            col, "missing_values",
            f"{na_count} missing values (imputed with the training mean)",
            severity="warning"
        ))
    return issues


def validate_counts(df: pd.DataFrame, count_cols: List[str]) -> List[ValidationIssue]:
    """Count columns must be complete, non-negative whole numbers."""
    issues = []
    for col in count_cols:
        if col not in df.columns:
            continue
        numeric = pd.to_numeric(df[col], errors="coerce")
        bad = numeric.isna().sum()
        if bad > 0:
            issues.append(ValidationIssue(
                col, "non_numeric",
                f"{bad} missing or non-numeric values",
                severity="error"
            ))
        neg_count = (numeric < 0).sum()
        if neg_count > 0:
            issues.append(ValidationIssue(
                col, "negative_values",
                f"{neg_count} negative values found",
                severity="error"
            ))
        fractional = (numeric.dropna() % 1 != 0).sum()
        if fractional > 0:
            issues.append(ValidationIssue(
                col, "non_integer",
                f"{fractional} fractional values found",
                severity="error"
            ))
    return issues


def validate_dataset(df: pd.DataFrame) -> ValidationReport:
    """Complete dataset validation."""
    report = ValidationReport()
    report.n_rows = len(df)
    report.n_cols = len(df.columns)

    checks = [
        validate_column_presence(df, DATA_CONFIG.required_columns),
        validate_categories(df),
        validate_bed_grade(df),
        validate_counts(df, [DATA_CONFIG.visitors_column, DATA_CONFIG.rooms_column]),
    ]
    for issues in checks:
        for issue in issues:
            report.add_issue(issue.column, issue.issue_type, issue.message, issue.severity)

    if report.n_rows == 0:
        report.add_issue("dataset", "empty", "No rows found", severity="error")

    for col in df.select_dtypes(include=[np.number]).columns:
        report.column_stats[col] = {
            "min": df[col].min(),
            "max": df[col].max(),
            "mean": df[col].mean(),
            "std": df[col].std(),
        }

    return report


def print_validation_report(report: ValidationReport) -> None:
    """Print validation report to console."""
    print("=" * 60)
    print("VALIDATION REPORT")
    print("=" * 60)

    status = "PASSED" if report.is_valid else "FAILED"
    print(f"\nStatus: {status}")
    print(f"Rows: {report.n_rows}")
    print(f"Columns: {report.n_cols}")

    if report.issues:
        print(f"\nIssues ({len(report.issues)}):")
        for issue in report.issues:
            print(f"  [{issue.severity.upper()}] {issue.column}: {issue.message}")
    else:
        print("\nNo issues found.")


def save_validation_report(report: ValidationReport, output_path: str) -> None:
    """Save validation report to markdown file."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        f.write("# Admission Data Validation Report\n\n")
        f.write(f"**Status:** {'PASSED' if report.is_valid else 'FAILED'}\n\n")
        f.write(f"- Rows: {report.n_rows}\n")
        f.write(f"- Columns: {report.n_cols}\n\n")

        if report.issues:
            f.write("## Issues\n\n")
            for issue in report.issues:
                f.write(f"- **{issue.severity.upper()}** [{issue.column}]: {issue.message}\n")
            f.write("\n")

        if report.column_stats:
            f.write("## Numeric Columns\n\n")
            f.write("| Column | Min | Max | Mean | Std |\n")
            f.write("|--------|-----|-----|------|-----|\n")
            for col, stats in report.column_stats.items():
                f.write(f"| {col} | {stats['min']} | {stats['max']} | "
                        f"{stats['mean']:.2f} | {stats['std']:.2f} |\n")
