"""
Feature encoding for the Hospital Length-of-Stay Report.

Training and testing rows go through the same ``build_features`` call; the
only fitted quantity is the bed-grade fill value held by ``FeatureParams``,
which is computed from the training subset alone.
"""
import pandas as pd
import numpy as np
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Any

from losreport.config import DATA_CONFIG, MODEL_CONFIG, logger
from losreport.data.schema import (
    AdmissionType, IllnessSeverity, StayBucket, BED_GRADES, SEVERITY_CODES, STAY_MIDPOINTS,
    parse_category, strip_text
)
from losreport.errors import InvalidInputError, InsufficientDataError

ADMISSION_INDICATORS = {
    AdmissionType.EMERGENCY: "emergency",
    AdmissionType.URGENT: "urgent",
    AdmissionType.TRAUMA: "trauma",
}


@dataclass(frozen=True)
class FeatureParams:
    """Values fitted on the training subset and reused unchanged on testing."""
    bed_grade_fill: float


def fit_feature_params(train_df: pd.DataFrame) -> FeatureParams:
    """
    Compute the bed-grade imputation constant from training rows.

    Raises:
        InvalidInputError: If a bed grade is present but not one of 1-4.
        InsufficientDataError: If no training row has a bed grade.
    """
    grades = checked_bed_grades(train_df[DATA_CONFIG.bed_grade_column]).dropna()
    if grades.empty:
        raise InsufficientDataError("No observed bed grade in training data; cannot impute")
    fill = float(grades.mean())
    logger.info(f"Bed grade fill value (training mean): {fill:.4f}")
    return FeatureParams(bed_grade_fill=fill)


# --- Scalar encoders ---

def stay_midpoint(bucket: str) -> float:
    """Midpoint in days of a length-of-stay bucket, e.g. '0-10' -> 5."""
    return parse_category(StayBucket, bucket, DATA_CONFIG.stay_column).midpoint


def illness_severity_code(value: str) -> int:
    """Minor -> 1, Moderate -> 2, Extreme -> 3."""
    return parse_category(IllnessSeverity, value, DATA_CONFIG.severity_column).code


def admission_indicators(value: Any) -> Dict[str, int]:
    """One-hot flags for the admission type; all zero for an unknown type."""
    flags = {name: 0 for name in ADMISSION_INDICATORS.values()}
    raw = value.strip() if isinstance(value, str) else value
    for member, name in ADMISSION_INDICATORS.items():
        if raw == member.value:
            flags[name] = 1
    return flags


# --- Column encoders ---

def _unknown_values(raw: pd.Series, encoded: pd.Series) -> List[Any]:
    return sorted(raw[encoded.isna()].astype(str).unique().tolist())


def encode_stay_midpoint(stay: pd.Series) -> pd.Series:
    midpoints = strip_text(stay).map(STAY_MIDPOINTS)
    if midpoints.isna().any():
        raise InvalidInputError(
            f"Unrecognized {DATA_CONFIG.stay_column} values: {_unknown_values(stay, midpoints)}"
        )
    return midpoints.astype(float)


def log_stay(midpoints: pd.Series) -> pd.Series:
    if (midpoints <= 0).any():
        raise InvalidInputError("Stay midpoint must be positive to take its logarithm")
    return np.log(midpoints)


def encode_severity(severity: pd.Series) -> pd.Series:
    lookup = {member.value: code for member, code in SEVERITY_CODES.items()}
    codes = strip_text(severity).map(lookup)
    if codes.isna().any():
        raise InvalidInputError(
            f"Unrecognized {DATA_CONFIG.severity_column} values: {_unknown_values(severity, codes)}"
        )
    return codes.astype(int)


def encode_admission(admission: pd.Series) -> pd.DataFrame:
    cleaned = strip_text(admission).astype(object)
    return pd.DataFrame(
        {name: cleaned.eq(member.value).astype(int) for member, name in ADMISSION_INDICATORS.items()},
        index=admission.index,
    )


def checked_bed_grades(bed_grade: pd.Series) -> pd.Series:
    """Numeric bed grades with missing entries left as NaN; anything else must be 1-4."""
    grades = pd.to_numeric(bed_grade, errors="coerce")
    invalid = bed_grade.notna() & ~grades.isin(BED_GRADES)
    if invalid.any():
        raise InvalidInputError(
            f"Invalid {DATA_CONFIG.bed_grade_column} values (expected {BED_GRADES}): "
            f"{sorted(bed_grade[invalid].astype(str).unique().tolist())}"
        )
    return grades.astype(float)


def impute_bed_grade(bed_grade: pd.Series, fill: float) -> pd.Series:
    grades = checked_bed_grades(bed_grade)
    n_missing = int(grades.isna().sum())
    if n_missing:
        logger.warning(f"Imputed {n_missing} missing bed grades with {fill:.4f}")
    return grades.fillna(fill).astype(float)


def encode_count(values: pd.Series, column: str) -> pd.Series:
    counts = pd.to_numeric(values, errors="coerce")
    if counts.isna().any():
        raise InvalidInputError(f"Column '{column}' has missing or non-numeric values")
    if ((counts < 0) | (counts % 1 != 0)).any():
        raise InvalidInputError(f"Column '{column}' must hold non-negative whole counts")
    return counts


def build_features(df: pd.DataFrame, params: FeatureParams) -> pd.DataFrame:
    """
    Add the encoded model columns to a copy of the raw admissions frame.

    Args:
        df: Raw admissions (training or testing subset).
        params: Fitted parameters from ``fit_feature_params`` on training rows.

    Returns:
        pd.DataFrame with stay_midpoint, log_stay_midpoint, illness_severity_code,
        emergency/urgent/trauma, bed_grade, patient_visitors and available_rooms.

    Raises:
        InvalidInputError: On an unrecognized stay bucket or severity, a bed grade
            outside 1-4, or a bad count.
    """
    missing = [col for col in DATA_CONFIG.required_columns if col not in df.columns]
    if missing:
        raise InvalidInputError(f"Missing columns: {missing}")

    df = df.copy()

    df["stay_midpoint"] = encode_stay_midpoint(df[DATA_CONFIG.stay_column])
    df["log_stay_midpoint"] = log_stay(df["stay_midpoint"])
    df["illness_severity_code"] = encode_severity(df[DATA_CONFIG.severity_column])

    indicators = encode_admission(df[DATA_CONFIG.admission_column])
    for col in indicators.columns:
        df[col] = indicators[col]

    df["bed_grade"] = impute_bed_grade(df[DATA_CONFIG.bed_grade_column], params.bed_grade_fill)
    df["patient_visitors"] = encode_count(df[DATA_CONFIG.visitors_column], DATA_CONFIG.visitors_column)
    df["available_rooms"] = encode_count(df[DATA_CONFIG.rooms_column], DATA_CONFIG.rooms_column)

    return df


def transform_record(record: Dict[str, Any], params: FeatureParams) -> Dict[str, Any]:
    """Encode a single admission record through ``build_features``."""
    row = pd.DataFrame([record])
    encoded = build_features(row, params).iloc[0].to_dict()
    for col in ["illness_severity_code", "emergency", "urgent", "trauma"]:
        encoded[col] = int(encoded[col])
    return encoded


def get_feature_columns(df: Optional[pd.DataFrame] = None) -> List[str]:
    """
    Get the list of predictor columns used by the model.

    Only returns columns that exist in the provided DataFrame.
    """
    features = MODEL_CONFIG.feature_columns.copy()

    if df is not None:
        features = [col for col in features if col in df.columns]

    return features


def prepare_model_data(
    df: pd.DataFrame,
    target_col: Optional[str] = None
) -> Tuple[pd.DataFrame, Optional[pd.Series]]:
    """
    Prepare encoded data for model fitting or evaluation.

    Returns:
        Tuple of (X features DataFrame, y target Series).
    """
    target_col = target_col or MODEL_CONFIG.target_column
    feature_cols = get_feature_columns(df)
    missing = [col for col in MODEL_CONFIG.feature_columns if col not in feature_cols]
    if missing:
        raise InvalidInputError(f"Encoded features missing: {missing}. Run build_features first")

    X = df[feature_cols].astype(float)
    y = df[target_col].copy() if target_col in df.columns else None

    return X, y
